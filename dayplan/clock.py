# dayplan/clock.py
import math


def _part_to_number(part: str) -> float:
    text = part.strip()
    if not text:
        return 0.0
    return float(text)


def parse_hhmm(value) -> int:
    """
    Parse an "HH:MM" string into minutes since midnight.

    Zero padding is optional. Anything that does not read as two numbers
    separated by ":" is treated as midnight (0).
    """
    if value is None:
        return 0
    parts = str(value).split(":")
    if len(parts) < 2:
        return 0
    try:
        hours = _part_to_number(parts[0])
        minutes = _part_to_number(parts[1])
    except ValueError:
        return 0
    if not (math.isfinite(hours) and math.isfinite(minutes)):
        return 0
    return int(hours * 60 + minutes)


def format_minutes(total: int) -> str:
    """Minutes since midnight -> zero-padded "HH:MM"."""
    total = int(total)
    hours = total // 60
    minutes = total % 60
    return f"{hours:02d}:{minutes:02d}"
