"""Helpers coercing parsed document values into typed fields."""

from numbers import Real
from typing import Any, Dict, List, Optional, Tuple

from .errors import DocumentError


def require_mapping(value, path: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DocumentError(f"Expected a mapping, got {type(value).__name__}", path)
    return value


def require_list(value, path: str) -> List[Any]:
    if not isinstance(value, (list, tuple)):
        raise DocumentError(f"Expected a list, got {type(value).__name__}", path)
    return list(value)


def optional_mapping(data: Dict[str, Any], key: str, path: str) -> Dict[str, Any]:
    """Mapping stored under ``key``, empty when absent or null."""
    value = data.get(key)
    if value is None:
        return {}
    return require_mapping(value, f"{path}.{key}" if path else key)


def require_str(data: Dict[str, Any], key: str, path: str) -> str:
    value = data.get(key)
    if value is None:
        raise DocumentError(f"Missing required field '{key}'", path)
    if not isinstance(value, str):
        raise DocumentError(f"Field '{key}' must be a string, got {value!r}", path)
    return value


def optional_str(data: Dict[str, Any], key: str, path: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise DocumentError(f"Field '{key}' must be a string, got {value!r}", path)
    return value


def number(data: Dict[str, Any], key: str, default: float, path: str) -> float:
    """Float stored under ``key``, ``default`` when absent."""
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, Real) or isinstance(value, bool):
        raise DocumentError(f"Field '{key}' must be a number, got {value!r}", path)
    return float(value)


def parse_color(value, path: str) -> Tuple[float, float, float, float]:
    """
    Convert a document color to RGBA floats in [0, 1].

    Accepts "RRGGBBAA" / "RRGGBB" hex strings and sequences of 3 or 4 floats.
    """
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) not in (6, 8):
            raise DocumentError(f"Invalid hex color '{value}'", path)
        try:
            channels = [int(text[i:i + 2], 16) / 255.0 for i in range(0, len(text), 2)]
        except ValueError:
            raise DocumentError(f"Invalid hex color '{value}'", path) from None
    elif isinstance(value, (list, tuple)) and len(value) in (3, 4):
        if not all(isinstance(v, Real) and not isinstance(v, bool) for v in value):
            raise DocumentError(f"Invalid color {value!r}", path)
        channels = [min(max(float(v), 0.0), 1.0) for v in value]
    else:
        raise DocumentError(f"Invalid color {value!r}", path)

    if len(channels) == 3:
        channels.append(1.0)
    return tuple(channels)


def integer(data: Dict[str, Any], key: str, default: int, path: str) -> int:
    """Integer stored under ``key``; integral floats such as ``2.0`` are accepted."""
    value = number(data, key, default, path)
    if not float(value).is_integer():
        raise DocumentError(f"Field '{key}' must be an integer, got {data.get(key)!r}", path)
    return int(value)


def flag(data: Dict[str, Any], key: str, default: bool, path: str) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise DocumentError(f"Field '{key}' must be true or false, got {value!r}", path)
    return value
