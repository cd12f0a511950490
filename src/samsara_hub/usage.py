"""
Turn the display strings from the stats endpoint into gauge values.

These mirror what the dashboard does before drawing its progress bars:
each parser returns ``{"display": str, "percent": float}`` with the percent
clamped to 0-100.
"""
from __future__ import annotations

import re
from typing import Dict, Optional, Union

Gauge = Dict[str, Union[str, float]]

_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")
_SIGNED_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_PAREN_PERCENT = re.compile(r"\((\d+(?:\.\d+)?)%\)")
_RATIO = re.compile(r"(\d+(?:\.\d+)?)\s*[A-Za-z]*\s*/\s*(\d+(?:\.\d+)?)")

EMPTY: Gauge = {"display": "N/A", "percent": 0.0}


def _clamp(percent: float) -> float:
    return max(0.0, min(percent, 100.0))


def parse_percentage(value: Optional[str]) -> float:
    """First number in `value`, or 0."""
    if not value:
        return 0.0
    match = _NUMBER.search(value)
    return float(match.group(1)) if match else 0.0


def _parse_ratio_usage(value: Optional[str]) -> Gauge:
    # "<used>/<total>[unit] (<percent>%)"; without the percent, derive it from the ratio
    if not value:
        return dict(EMPTY)
    text = value.strip()
    match = _PAREN_PERCENT.search(text)
    if match:
        display = _PAREN_PERCENT.sub("", text, count=1).strip()
        return {"display": display, "percent": _clamp(float(match.group(1)))}

    percent = 0.0
    ratio = _RATIO.search(text)
    if ratio:
        used, total = float(ratio.group(1)), float(ratio.group(2))
        if total > 0:
            percent = used / total * 100
    display = text.split("(", 1)[0].strip() if "(" in text else text
    return {"display": display, "percent": _clamp(percent)}


def parse_memory_usage(value: Optional[str]) -> Gauge:
    return _parse_ratio_usage(value)


def parse_disk_usage(value: Optional[str]) -> Gauge:
    return _parse_ratio_usage(value)


def parse_cpu_usage(value: Optional[str]) -> Gauge:
    if not value:
        return dict(EMPTY)
    return {"display": value, "percent": _clamp(parse_percentage(value))}


def parse_temperature(value: Optional[str]) -> Gauge:
    """Reading in Celsius; a value tagged F (and not C) is converted first.

    The percent is the reading against a 100C scale.
    """
    if not value:
        return dict(EMPTY)
    raw = value.strip()
    match = _SIGNED_NUMBER.search(raw)
    if not match:
        return {"display": raw, "percent": 0.0}
    reading = float(match.group(0))
    lowered = raw.lower()
    if "f" in lowered and "c" not in lowered:
        reading = (reading - 32) * 5 / 9
    return {"display": f"{reading:.1f}\N{DEGREE SIGN}C", "percent": _clamp(reading)}


def gauges(stats: Dict[str, str]) -> Dict[str, Gauge]:
    """Gauge values for every metric in a stats response."""
    return {
        "cpu": parse_cpu_usage(stats.get("cpuUsage")),
        "memory": parse_memory_usage(stats.get("memoryUsage")),
        "temperature": parse_temperature(stats.get("temperature")),
        "storage": parse_disk_usage(stats.get("diskUsage")),
    }
