"""Receiver descriptions.

Frozen dataclasses describing the receiver class as the resolution engine
sees it: an ordered list of named fields, each with its type and its raw
``Annotated`` metadata. Built by the class adapters, consumed by the
resolution pass.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Annotated, Any, get_args, get_origin

from struct_auto_from.core.diagnostics import Span
from struct_auto_from.core.enums import ClassKind


@dataclass(frozen=True, eq=False)
class RawAttribute:
    """One unparsed ``auto_from_attr`` occurrence.

    ``sources`` holds positional payloads (attribute-language strings),
    ``keywords`` holds keyword payloads. Parsing happens later, during the
    expansion pass, so that every problem is reported together.
    """

    sources: tuple[Any, ...] = ()
    keywords: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        args = [repr(source) for source in self.sources]
        args.extend(f"{key}={value!r}" for key, value in self.keywords.items())
        return f"auto_from_attr({', '.join(args)})"


def split_annotated(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, *meta]`` into ``(T, meta)``."""
    if get_origin(hint) is Annotated:
        base, *metadata = get_args(hint)
        return base, tuple(metadata)
    return hint, ()


@dataclass(frozen=True)
class FieldDescription:
    """A single receiver field."""

    name: str
    owner: str
    annotation: Any = Any
    attributes: tuple[Any, ...] = ()
    keyword: str | None = None  # constructor keyword, when it differs from name

    @property
    def span(self) -> Span:
        return Span(f"{self.owner}.{self.name}")

    @property
    def init_keyword(self) -> str:
        return self.keyword or self.name

    def directive_attributes(self) -> list[RawAttribute]:
        """The field's ``auto_from_attr`` markers, in declaration order."""
        return [attr for attr in self.attributes if isinstance(attr, RawAttribute)]

    @property
    def has_directives(self) -> bool:
        return any(isinstance(attr, RawAttribute) for attr in self.attributes)

    def without_directives(self) -> FieldDescription:
        kept = tuple(attr for attr in self.attributes if not isinstance(attr, RawAttribute))
        return dataclasses.replace(self, attributes=kept)

    @property
    def declared_type(self) -> Any:
        """The annotation as it should appear on the emitted class."""
        if not self.attributes:
            return self.annotation
        return Annotated[(self.annotation, *self.attributes)]


@dataclass(frozen=True)
class ReceiverDescription:
    """The receiver class: name, flavour and ordered fields."""

    name: str
    kind: ClassKind
    fields: tuple[FieldDescription, ...] = ()

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def span(self) -> Span:
        return Span(self.name)

    def field(self, name: str) -> FieldDescription:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def strip_directives(self) -> ReceiverDescription:
        """Return a copy with every ``auto_from_attr`` marker removed."""
        return dataclasses.replace(
            self, fields=tuple(f.without_directives() for f in self.fields)
        )
