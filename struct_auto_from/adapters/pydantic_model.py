"""Pydantic model receiver adapter."""

from __future__ import annotations

from collections.abc import Sequence

from struct_auto_from.adapters.protocol import rewrite_annotations
from struct_auto_from.core.description import (
    FieldDescription,
    RawAttribute,
    ReceiverDescription,
)
from struct_auto_from.core.enums import ClassKind


class PydanticModelAdapter:
    """Adapter for Pydantic ``BaseModel`` receivers.

    Pydantic has already split ``Annotated`` fields into ``FieldInfo.annotation``
    and ``FieldInfo.metadata``; directive markers end up in the metadata.
    Aliased fields are constructed through their alias.
    """

    @property
    def kind(self) -> ClassKind:
        return ClassKind.PYDANTIC

    def describe(self, cls: type) -> ReceiverDescription:
        fields = []
        for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
            keyword = info.alias if info.alias and info.alias != name else None
            fields.append(
                FieldDescription(
                    name=name,
                    owner=cls.__name__,
                    annotation=info.annotation,
                    attributes=tuple(info.metadata),
                    keyword=keyword,
                )
            )
        return ReceiverDescription(name=cls.__name__, kind=self.kind, fields=tuple(fields))

    def apply(self, cls: type, fields: Sequence[FieldDescription]) -> None:
        model_fields = cls.model_fields  # type: ignore[attr-defined]
        for f in fields:
            info = model_fields.get(f.name)
            if info is not None:
                info.metadata = [m for m in info.metadata if not isinstance(m, RawAttribute)]
        rewrite_annotations(cls, fields)
