"""Range clamping helpers for configuration validators.

Settings coming from a host UI are frequently out of range; they are pulled
back into range with a warning instead of failing validation.
"""

from typing import Any, Optional, Union

from loguru import logger

Number = Union[int, float]


def clamp_number(
    name: str,
    value: Any,
    low: Optional[Number] = None,
    high: Optional[Number] = None,
    cast: type = float,
) -> Any:
    """Clamp a numeric setting into [low, high], logging a warning when it moves.

    Non-numeric values are returned unchanged so field validation reports them.
    """
    try:
        number = cast(value)
    except (TypeError, ValueError):
        return value

    clamped = number
    if low is not None and clamped < low:
        clamped = cast(low)
    if high is not None and clamped > high:
        clamped = cast(high)

    if clamped != number:
        logger.warning(f"Setting {name}={value!r} is out of range, using {clamped}")
    return clamped
