"""Receiver introspection.

Detects the receiver's class flavour and loads the matching adapter, which
turns the class into a ReceiverDescription.
"""

from __future__ import annotations

import dataclasses
import importlib
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from struct_auto_from.core.description import FieldDescription, ReceiverDescription
from struct_auto_from.core.diagnostics import Span, fail
from struct_auto_from.core.enums import ClassKind
from struct_auto_from.core.exceptions import AdapterError

# Adapter module mapping: class kind -> (module_path, adapter_class)
_ADAPTER_MAP: dict[ClassKind, tuple[str, str]] = {
    ClassKind.PYDANTIC: ("struct_auto_from.adapters.pydantic_model", "PydanticModelAdapter"),
    ClassKind.DATACLASS: ("struct_auto_from.adapters.dataclass", "DataclassAdapter"),
    ClassKind.PLAIN: ("struct_auto_from.adapters.plain", "PlainClassAdapter"),
}


def detect_kind(cls: type) -> ClassKind:
    """Detection order: Pydantic BaseModel, dataclass, plain class."""
    if issubclass(cls, BaseModel):
        return ClassKind.PYDANTIC
    if dataclasses.is_dataclass(cls):
        return ClassKind.DATACLASS
    return ClassKind.PLAIN


def load_adapter(kind: ClassKind) -> Any:
    """Load the adapter for a class kind."""
    if kind not in _ADAPTER_MAP:
        raise AdapterError(f"Unsupported class kind: {kind}")

    module_path, cls_name = _ADAPTER_MAP[kind]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{kind.value}' classes: {e}") from e


def describe_receiver(cls: Any) -> ReceiverDescription:
    """Describe *cls* as a receiver.

    Raises:
        DiagnosticError: If *cls* is not a class or has unsupported fields.
    """
    if not isinstance(cls, type):
        raise fail("`auto_from` can only be applied to a class", Span(repr(cls)))
    return load_adapter(detect_kind(cls)).describe(cls)


def apply_description(cls: type, description: ReceiverDescription, fields: Sequence[str]) -> None:
    """Write the declared types of *fields* from *description* back onto *cls*."""
    if not fields:
        return
    selected: list[FieldDescription] = [description.field(name) for name in fields]
    load_adapter(description.kind).apply(cls, selected)
