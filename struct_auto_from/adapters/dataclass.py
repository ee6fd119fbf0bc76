"""Dataclass receiver adapter."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from typing import Any

from struct_auto_from.adapters.protocol import resolve_type_hints, rewrite_annotations
from struct_auto_from.core.description import (
    FieldDescription,
    ReceiverDescription,
    split_annotated,
)
from struct_auto_from.core.enums import ClassKind


class DataclassAdapter:
    """Adapter for ``@dataclass`` receivers.

    Fields declared with ``init=False`` are not populated by conversions.
    """

    @property
    def kind(self) -> ClassKind:
        return ClassKind.DATACLASS

    def describe(self, cls: type) -> ReceiverDescription:
        hints = resolve_type_hints(cls, cls)
        fields = []
        for f in dataclasses.fields(cls):
            if not f.init:
                continue
            annotation, metadata = split_annotated(hints.get(f.name, Any))
            fields.append(
                FieldDescription(
                    name=f.name,
                    owner=cls.__name__,
                    annotation=annotation,
                    attributes=metadata,
                )
            )
        return ReceiverDescription(name=cls.__name__, kind=self.kind, fields=tuple(fields))

    def apply(self, cls: type, fields: Sequence[FieldDescription]) -> None:
        by_name = {f.name: f for f in fields}
        for f in dataclasses.fields(cls):
            if f.name in by_name:
                f.type = by_name[f.name].declared_type
        rewrite_annotations(cls, fields)
