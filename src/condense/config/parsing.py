"""Parsing helpers shared by TOML and environment configuration."""

from __future__ import annotations

from typing import Any, Optional


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _parse_optional_float(value: Any) -> Optional[float]:
    """Parse a float where empty, "none" and non-positive values mean unset."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in {"", "none", "null"}:
        return None
    parsed = float(value)
    return parsed if parsed > 0 else None
