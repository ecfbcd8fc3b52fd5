"""Human-readable formatting for build summaries."""

from __future__ import annotations

import math

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_file_size(size_bytes: int | float) -> str:
    if not isinstance(size_bytes, (int, float)) or math.isnan(size_bytes) or size_bytes <= 0:
        return "0 B"

    index = 0
    value = float(size_bytes)
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    if index == 0:
        return f"{int(value)} B"
    return f"{value:.1f} {_SIZE_UNITS[index]}"


def format_duration(milliseconds: int | float) -> str:
    if not isinstance(milliseconds, (int, float)) or math.isnan(milliseconds) or milliseconds < 0:
        return "0ms"
    if milliseconds < 1000:
        return f"{round(milliseconds)}ms"

    seconds = milliseconds / 1000
    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes = int(seconds // 60)
    remaining_seconds = round(seconds % 60)
    if minutes < 60:
        return f"{minutes}m {remaining_seconds}s" if remaining_seconds > 0 else f"{minutes}m"

    hours = minutes // 60
    remaining_minutes = minutes % 60
    out = f"{hours}h"
    if remaining_minutes > 0:
        out += f" {remaining_minutes}m"
    if remaining_seconds > 0:
        out += f" {remaining_seconds}s"
    return out


def format_percentage(value: float, decimals: int = 1) -> str:
    if not isinstance(value, (int, float)) or math.isnan(value):
        return "0%"
    return f"{value:.{decimals}f}%"
