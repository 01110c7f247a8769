import sys
import typer
import yaml
from pathlib import Path
from typing import Optional
from rich.console import Console

from mediaaudit.config.loader import load_config
from mediaaudit.domain.errors import WalkError
from mediaaudit.domain.events import ScanStarted
from mediaaudit.infrastructure.logging import setup_logging
from mediaaudit.infrastructure.event_bus import EventBus
from mediaaudit.infrastructure.classifier import FileClassifier
from mediaaudit.infrastructure.file_scanner import FileScanner
from mediaaudit.infrastructure.mediainfo import MediaInfoAdapter, template_file
from mediaaudit.infrastructure.csv_sink import CsvSink
from mediaaudit.pipeline.dispatcher import Dispatcher
from mediaaudit.pipeline.reporter import ScanReporter
from mediaaudit.pipeline.stats import ScanStats

app = typer.Typer(help="mediaaudit - CSV report of codec, size, bitrate and resolution for a video tree")


@app.command()
def audit(
    root: Path = typer.Argument(..., help="Directory to scan recursively"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
    max_concurrency: Optional[int] = typer.Option(
        None, "--max-concurrency", "-j", min=1, help="Override maximum concurrent mediainfo probes"
    ),
    mediainfo_bin: Optional[str] = typer.Option(None, "--mediainfo", help="mediainfo executable to run"),
    log_path: Optional[Path] = typer.Option(None, "--log-path", help="Also write diagnostics to this file"),
    summary: Optional[bool] = typer.Option(None, "--summary/--no-summary", help="Print a summary line to stderr"),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Enable verbose debug logging"),
):
    """Scan ROOT for video files and write a CSV report to stdout."""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    # Apply CLI overrides
    if max_concurrency: config.general.max_concurrency = max_concurrency
    if mediainfo_bin: config.probe.binary = mediainfo_bin
    if log_path is not None: config.general.log_path = str(log_path)
    if summary is not None: config.output.summary = summary
    if debug: config.general.debug = True

    logger = setup_logging(
        debug=config.general.debug,
        log_path=Path(config.general.log_path) if config.general.log_path else None,
    )
    logger.debug(
        f"Config: max_concurrency={config.general.max_concurrency}, "
        f"mediainfo={config.probe.binary}, timeout={config.probe.timeout_s}"
    )

    bus = EventBus()
    stats = ScanStats(bus)
    # Undecodable file names come back from os.walk as surrogate escapes; write their raw bytes
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(errors="surrogateescape")
    sink = CsvSink(sys.stdout)
    scanner = FileScanner(
        classifier=FileClassifier(
            video_extensions=config.scan.video_extensions,
            sidecar_extensions=config.scan.sidecar_extensions,
        ),
        event_bus=bus,
    )

    try:
        with template_file() as template_path:
            adapter = MediaInfoAdapter(
                template_path=template_path,
                binary=config.probe.binary,
                timeout_s=config.probe.timeout_s,
            )
            dispatcher = Dispatcher(
                adapter=adapter,
                reporter=ScanReporter(sink, event_bus=bus),
                capacity=config.general.max_concurrency,
                event_bus=bus,
            )

            sink.write_header()
            bus.publish(ScanStarted(root=root))
            logger.info(f"Scan started: {root}")
            dispatcher.run(scanner.scan(root))
    except WalkError:
        # Already logged by the scanner; in-flight tasks have drained. Not an error exit.
        pass
    except KeyboardInterrupt:
        typer.secho("\nScan stopped by user (Ctrl+C)", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=130)
    except OSError as e:
        # Template file could not be created
        logger.error(f"Startup failed: {e}")
        raise typer.Exit(code=1)

    if config.output.summary:
        Console(stderr=True).print(stats.summary_line(), highlight=False, soft_wrap=True)


if __name__ == "__main__":
    app()
