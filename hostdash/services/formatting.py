import math
from datetime import timedelta

_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_bytes(num_bytes: float) -> str:
    """
    Render a byte count with the largest binary unit not exceeding it.

    The value is rounded to one decimal place and a trailing '.0' is dropped,
    so 1536 becomes '1.5 KB' and 1024 becomes '1 KB'.
    """
    if num_bytes <= 0:
        return "0 B"

    index = min(int(math.floor(math.log(num_bytes, 1024))), len(_SIZE_UNITS) - 1)
    value = round(num_bytes / (1024 ** index), 1)
    # log() can land just below an exact power of 1024
    if value >= 1024 and index < len(_SIZE_UNITS) - 1:
        index += 1
        value = round(num_bytes / (1024 ** index), 1)
    text = f"{value:.1f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[index]}"


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}" if value == 1 else f"{value} {unit}s"


def format_uptime(seconds: float) -> str:
    """Phrase an uptime the way `uptime -p` does, e.g. 'up 3 days, 2 hours'."""
    delta = timedelta(seconds=int(max(0, seconds)))
    weeks, days = divmod(delta.days, 7)
    hours, remainder = divmod(delta.seconds, 3600)
    minutes = remainder // 60

    parts = []
    if weeks:
        parts.append(_plural(weeks, "week"))
    if days:
        parts.append(_plural(days, "day"))
    if hours:
        parts.append(_plural(hours, "hour"))
    if minutes or not parts:
        parts.append(_plural(minutes, "minute"))
    return "up " + ", ".join(parts)
