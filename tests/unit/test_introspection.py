"""Unit tests for receiver introspection and the class adapters."""

from __future__ import annotations

import dataclasses
import typing
from dataclasses import dataclass, field
from typing import Annotated

import pytest
from pydantic import BaseModel, Field

from struct_auto_from import auto_from_attr
from struct_auto_from.core.description import RawAttribute
from struct_auto_from.core.enums import ClassKind
from struct_auto_from.core.exceptions import AdapterError, DiagnosticError
from struct_auto_from.core.introspection import (
    apply_description,
    describe_receiver,
    detect_kind,
    load_adapter,
)


@dataclass
class DataReceiver:
    id: Annotated[int, "doc", auto_from_attr("default_value = 0")]
    name: str
    cached: str = field(default="", init=False)


class PydanticReceiver(BaseModel):
    id: Annotated[int, auto_from_attr("default_value = 0")]
    name: str = Field(alias="userName")


class PlainReceiver:
    def __init__(self, id: Annotated[int, auto_from_attr("default_value = 0")], name: str, **extra) -> None:
        self.id = id
        self.name = name


class PositionalReceiver:
    def __init__(self, a: int, /, b: int, *rest: int) -> None:
        self.a = a


class EmptyReceiver:
    pass


@dataclass
class Unresolvable:
    x: MissingType  # type: ignore[name-defined]  # noqa: F821


class TestDetectKind:
    def test_pydantic(self) -> None:
        assert detect_kind(PydanticReceiver) is ClassKind.PYDANTIC

    def test_dataclass(self) -> None:
        assert detect_kind(DataReceiver) is ClassKind.DATACLASS

    def test_plain(self) -> None:
        assert detect_kind(PlainReceiver) is ClassKind.PLAIN

    def test_unknown_kind(self) -> None:
        with pytest.raises(AdapterError):
            load_adapter("xml")  # type: ignore[arg-type]


class TestDescribeDataclass:
    def test_fields(self) -> None:
        description = describe_receiver(DataReceiver)
        assert description.name == "DataReceiver"
        assert description.kind is ClassKind.DATACLASS
        assert description.field_names == ["id", "name"]

    def test_metadata_split(self) -> None:
        id_field = describe_receiver(DataReceiver).field("id")
        assert id_field.annotation is int
        assert id_field.attributes[0] == "doc"
        assert isinstance(id_field.attributes[1], RawAttribute)
        assert id_field.has_directives

    def test_unresolvable_annotation(self) -> None:
        with pytest.raises(DiagnosticError) as exc_info:
            describe_receiver(Unresolvable)
        assert exc_info.value.messages[0].startswith("cannot resolve type annotations")


class TestDescribePydantic:
    def test_alias_keyword(self) -> None:
        name = describe_receiver(PydanticReceiver).field("name")
        assert name.keyword == "userName"
        assert name.init_keyword == "userName"

    def test_metadata(self) -> None:
        id_field = describe_receiver(PydanticReceiver).field("id")
        assert id_field.annotation is int
        assert id_field.has_directives


class TestDescribePlain:
    def test_init_parameters(self) -> None:
        description = describe_receiver(PlainReceiver)
        assert description.field_names == ["id", "name"]
        assert description.field("id").has_directives

    def test_positional_parameters_rejected(self) -> None:
        with pytest.raises(DiagnosticError) as exc_info:
            describe_receiver(PositionalReceiver)
        assert exc_info.value.messages == ["positional fields are not supported"] * 2
        assert [str(d.span) for d in exc_info.value.diagnostics] == [
            "PositionalReceiver.a",
            "PositionalReceiver.rest",
        ]

    def test_no_init(self) -> None:
        assert describe_receiver(EmptyReceiver).fields == ()

    def test_not_a_class(self) -> None:
        with pytest.raises(DiagnosticError) as exc_info:
            describe_receiver(42)
        assert exc_info.value.messages == ["`auto_from` can only be applied to a class"]


class TestApplyDescription:
    def test_dataclass_annotations_stripped(self) -> None:
        @dataclass
        class Local:
            id: Annotated[int, "doc", auto_from_attr("default_value = 0")]

        description = describe_receiver(Local).strip_directives()
        apply_description(Local, description, ["id"])

        (f,) = dataclasses.fields(Local)
        assert f.type == Annotated[int, "doc"]
        assert typing.get_type_hints(Local, include_extras=True)["id"] == Annotated[int, "doc"]

    def test_bare_type_when_only_directives(self) -> None:
        @dataclass
        class Local:
            id: Annotated[int, auto_from_attr("default_value = 0")]

        apply_description(Local, describe_receiver(Local).strip_directives(), ["id"])
        assert Local.__annotations__["id"] is int

    def test_pydantic_metadata_stripped(self) -> None:
        class Local(BaseModel):
            id: Annotated[int, auto_from_attr("default_value = 0")]

        apply_description(Local, describe_receiver(Local).strip_directives(), ["id"])
        assert not any(isinstance(m, RawAttribute) for m in Local.model_fields["id"].metadata)

    def test_plain_init_annotations_stripped(self) -> None:
        class Local:
            def __init__(self, id: Annotated[int, auto_from_attr("default_value = 0")]) -> None:
                self.id = id

        apply_description(Local, describe_receiver(Local).strip_directives(), ["id"])
        assert typing.get_type_hints(Local.__init__, include_extras=True)["id"] is int

    def test_no_fields_is_noop(self) -> None:
        before = dict(DataReceiver.__annotations__)
        apply_description(DataReceiver, describe_receiver(DataReceiver), [])
        assert DataReceiver.__annotations__ == before
