"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from struct_auto_from.core.description import FieldDescription, ReceiverDescription
from struct_auto_from.core.enums import ClassKind
from struct_auto_from.core.registry import ConverterRegistry


@pytest.fixture
def registry() -> ConverterRegistry:
    """Fresh converter registry, isolated from the package-wide one."""
    return ConverterRegistry()


@pytest.fixture
def make_field():
    """Helper to build a receiver field description.

    Usage:
        make_field("name", auto_from_attr('from_field = "nom"'))
    """

    def _make(name: str, *attributes: Any, annotation: Any = Any, keyword: str | None = None):
        return FieldDescription(
            name=name,
            owner="Receiver",
            annotation=annotation,
            attributes=attributes,
            keyword=keyword,
        )

    return _make


@pytest.fixture
def make_receiver():
    """Helper to build a receiver description from field descriptions."""

    def _make(*fields: FieldDescription, name: str = "Receiver") -> ReceiverDescription:
        return ReceiverDescription(name=name, kind=ClassKind.DATACLASS, fields=tuple(fields))

    return _make
