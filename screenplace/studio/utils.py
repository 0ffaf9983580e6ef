"""Shared utilities used by multiple modules."""

from typing import Tuple


def fmt_time(ms: float) -> str:
    """Format milliseconds as m:ss."""
    s = int(max(ms, 0) / 1000)
    m = s // 60
    return f"{m}:{s % 60:02d}"


def fmt_duration(ms: float) -> str:
    """Format milliseconds as mm:ss (recording timer)."""
    s = int(max(ms, 0) / 1000)
    m = s // 60
    return f"{m:02d}:{s % 60:02d}"


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    """Parse ``#rgb`` or ``#rrggbb`` into an (R, G, B) tuple."""
    digits = color.lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        raise ValueError(f"not a hex colour: {color!r}")
    return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))


def clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)
