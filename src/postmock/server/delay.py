"""Simulated response latency.

A delay spec is ``"0"`` (none), a single millisecond count such as ``"250"``,
or a ``"min-max"`` range such as ``"100-300"``.
"""

import asyncio
import math

from postmock.generator.random_source import RandomSource


def _to_number(text: str) -> float | None:
    text = text.strip()
    if not text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return None
    return None if math.isnan(value) else value


def _clamp(value: float | None) -> float:
    if value is None or value < 0:
        return 0.0
    return value


def parse_delay(spec: str | int | float | None) -> tuple[float, float]:
    """Return ``(min_ms, max_ms)``; invalid or negative parts become 0."""
    if spec is None:
        return 0.0, 0.0
    if not isinstance(spec, str):
        value = _clamp(float(spec))
        return value, value

    if "-" in spec and not spec.startswith("-"):
        parts = spec.split("-")
        low, high = _to_number(parts[0]), _to_number(parts[1])
    else:
        low = high = _to_number(spec)
    return _clamp(low), _clamp(high)


def validate_delay_range(spec: str) -> str:
    """Check a delay spec given on the command line. Returns it unchanged."""
    if spec == "0":
        return spec

    if "-" in spec and not spec.startswith("-"):
        parts = spec.split("-")
        low, high = _to_number(parts[0]), _to_number(parts[1])
        if low is None or high is None or low < 0 or high < 0 or low > high:
            raise ValueError(
                f'Invalid delay range: {spec}. Must be in format "min-max" where min <= max.'
            )
    else:
        value = _to_number(spec)
        if value is None or value < 0:
            raise ValueError(f"Invalid delay: {spec}. Must be a positive number.")
    return spec


async def apply_delay(spec: str | int | float | None, source: RandomSource | None = None) -> float:
    """Sleep for the delay described by ``spec`` and return the milliseconds slept."""
    low, high = parse_delay(spec)
    if low == 0 and high == 0:
        return 0.0

    if low == high:
        delay = low
    else:
        delay = (source or RandomSource()).between(low, high)

    await asyncio.sleep(max(delay, 0) / 1000)
    return delay
