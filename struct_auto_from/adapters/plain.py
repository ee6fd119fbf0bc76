"""Plain class receiver adapter."""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from typing import Any

from struct_auto_from.adapters.protocol import resolve_type_hints, rewrite_annotations
from struct_auto_from.core.description import (
    FieldDescription,
    ReceiverDescription,
    split_annotated,
)
from struct_auto_from.core.diagnostics import Diagnostic, DiagnosticAccumulator, Span
from struct_auto_from.core.enums import ClassKind

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.VAR_POSITIONAL)


class PlainClassAdapter:
    """Adapter for plain classes, described through their ``__init__`` parameters.

    Conversions construct the receiver with keyword arguments, so
    positional-only and ``*args`` parameters are rejected.
    """

    @property
    def kind(self) -> ClassKind:
        return ClassKind.PLAIN

    def describe(self, cls: type) -> ReceiverDescription:
        init = cls.__init__  # type: ignore[misc]
        if init is object.__init__:
            return ReceiverDescription(name=cls.__name__, kind=self.kind)

        acc = DiagnosticAccumulator()
        hints = resolve_type_hints(init, cls)
        fields = []
        params = list(inspect.signature(init).parameters.values())[1:]  # drop self
        for param in params:
            if param.kind in _POSITIONAL:
                acc.push(
                    Diagnostic(
                        "positional fields are not supported",
                        Span(f"{cls.__name__}.{param.name}"),
                    )
                )
                continue
            if param.kind is inspect.Parameter.VAR_KEYWORD:
                continue
            annotation, metadata = split_annotated(hints.get(param.name, Any))
            fields.append(
                FieldDescription(
                    name=param.name,
                    owner=cls.__name__,
                    annotation=annotation,
                    attributes=metadata,
                )
            )
        return acc.finish_with(
            ReceiverDescription(name=cls.__name__, kind=self.kind, fields=tuple(fields))
        )

    def apply(self, cls: type, fields: Sequence[FieldDescription]) -> None:
        init = cls.__init__  # type: ignore[misc]
        init_annotations = getattr(init, "__annotations__", None)
        if isinstance(init_annotations, dict):
            for f in fields:
                if f.name in init_annotations:
                    init_annotations[f.name] = f.declared_type
        rewrite_annotations(cls, fields)
