import math

BINARY_MEGA = 1048576


def round_half_away(value: float, digits: int) -> float:
    """Round to `digits` decimals, halves away from zero (not banker's rounding)."""
    scale = 10 ** digits
    scaled = value * scale
    return math.copysign(math.floor(abs(scaled) + 0.5), scaled) / scale


def size_mb(size_bytes: int) -> float:
    """File size in binary megabytes, two decimals."""
    return round_half_away(size_bytes / BINARY_MEGA, 2)


def bitrate_mbps(bitrate: int) -> float:
    """mediainfo bitrate converted with the binary divisor, three decimals."""
    return round_half_away(bitrate / BINARY_MEGA, 3)
