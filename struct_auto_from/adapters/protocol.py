"""Receiver class adapter protocol.

Every adapter module MUST implement this protocol: describe a class as a
ReceiverDescription, and write stripped field annotations back onto it.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from struct_auto_from.core.description import FieldDescription, ReceiverDescription
from struct_auto_from.core.diagnostics import Span, fail
from struct_auto_from.core.enums import ClassKind


@runtime_checkable
class ClassAdapter(Protocol):
    """Receiver class adapter protocol."""

    @property
    def kind(self) -> ClassKind:
        """The class flavour this adapter handles."""
        ...

    def describe(self, cls: type) -> ReceiverDescription:
        """Describe *cls*; raises DiagnosticError on structural problems."""
        ...

    def apply(self, cls: type, fields: Sequence[FieldDescription]) -> None:
        """Write the declared types of *fields* back onto *cls*."""
        ...


def resolve_type_hints(obj: type | Callable[..., Any], owner: type) -> dict[str, Any]:
    """``typing.get_type_hints`` with extras, reporting unresolvable names.

    *owner* is made visible by name so self-referencing annotations resolve
    while the class is still being decorated.
    """
    try:
        return typing.get_type_hints(obj, include_extras=True, localns={owner.__name__: owner})
    except NameError as e:
        raise fail(f"cannot resolve type annotations: {e}", Span(owner.__name__)) from None


def rewrite_annotations(cls: type, fields: Sequence[FieldDescription]) -> None:
    """Replace the class's own annotations for *fields* with their declared types."""
    own = dict(inspect.get_annotations(cls))
    for f in fields:
        if f.name in own:
            own[f.name] = f.declared_type
    cls.__annotations__ = own
