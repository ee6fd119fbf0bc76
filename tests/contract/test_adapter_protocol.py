"""Contract tests for class adapter protocol compliance."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import pytest
from pydantic import BaseModel

from struct_auto_from import auto_from_attr
from struct_auto_from.adapters.dataclass import DataclassAdapter
from struct_auto_from.adapters.plain import PlainClassAdapter
from struct_auto_from.adapters.protocol import ClassAdapter
from struct_auto_from.adapters.pydantic_model import PydanticModelAdapter
from struct_auto_from.core.description import RawAttribute, ReceiverDescription
from struct_auto_from.core.enums import ClassKind
from struct_auto_from.core.introspection import load_adapter


@dataclass
class DataShape:
    id: int
    name: Annotated[str, auto_from_attr('from_field = "nom"')]


class ModelShape(BaseModel):
    id: int
    name: Annotated[str, auto_from_attr('from_field = "nom"')]


class PlainShape:
    def __init__(self, id: int, name: Annotated[str, auto_from_attr('from_field = "nom"')]) -> None:
        self.id = id
        self.name = name


ADAPTERS = [
    (DataclassAdapter, ClassKind.DATACLASS, DataShape),
    (PydanticModelAdapter, ClassKind.PYDANTIC, ModelShape),
    (PlainClassAdapter, ClassKind.PLAIN, PlainShape),
]


@pytest.mark.parametrize(("adapter_cls", "kind", "shape"), ADAPTERS)
class TestClassAdapterProtocol:
    def test_implements_protocol(self, adapter_cls, kind, shape) -> None:
        assert isinstance(adapter_cls(), ClassAdapter)

    def test_kind(self, adapter_cls, kind, shape) -> None:
        assert adapter_cls().kind is kind

    def test_loaded_by_kind(self, adapter_cls, kind, shape) -> None:
        assert isinstance(load_adapter(kind), adapter_cls)

    def test_describe(self, adapter_cls, kind, shape) -> None:
        description = adapter_cls().describe(shape)
        assert isinstance(description, ReceiverDescription)
        assert description.kind is kind
        assert description.field_names == ["id", "name"]
        assert description.field("id").annotation is int
        assert description.field("name").annotation is str
        assert isinstance(description.field("name").directive_attributes()[0], RawAttribute)

    def test_describe_is_repeatable(self, adapter_cls, kind, shape) -> None:
        adapter = adapter_cls()
        assert adapter.describe(shape).field_names == adapter.describe(shape).field_names
