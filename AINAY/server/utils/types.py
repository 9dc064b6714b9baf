from __future__ import annotations

from typing import Any


# -----------------------------------------------------------------------------
def coerce_positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or value is None:
        return default
    try:
        candidate = int(float(value))
    except (TypeError, ValueError):
        return default
    return candidate if candidate > 0 else default


# -----------------------------------------------------------------------------
def coerce_float(
    value: Any, default: float, minimum: float | None = None
) -> float:
    if isinstance(value, bool):
        return default
    try:
        candidate = float(value)
    except (TypeError, ValueError):
        candidate = default
    if minimum is not None and candidate < minimum:
        candidate = minimum
    return candidate


# -----------------------------------------------------------------------------
def coerce_str(value: Any, default: str) -> str:
    if value is None:
        return default
    text = value.strip() if isinstance(value, str) else str(value).strip()
    return text or default


__all__ = [
    "coerce_float",
    "coerce_positive_int",
    "coerce_str",
]
