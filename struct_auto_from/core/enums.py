"""Enumerations shared across the package."""

from __future__ import annotations

from enum import Enum


class ClassKind(Enum):
    """Supported receiver class flavours."""

    PYDANTIC = "pydantic"
    DATACLASS = "dataclass"
    PLAIN = "plain"


class DirectiveKey(Enum):
    """Keys recognised inside an ``auto_from_attr`` directive."""

    DEFAULT_VALUE = "default_value"
    FROM_FIELD = "from_field"
    FROM_STRUCT = "from_struct"
