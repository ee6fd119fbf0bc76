"""struct-auto-from - generate struct-to-struct conversions from field directives."""

from __future__ import annotations

from struct_auto_from.api import auto_from, auto_from_attr
from struct_auto_from.core.config import AutoFromConfig
from struct_auto_from.core.description import (
    FieldDescription,
    RawAttribute,
    ReceiverDescription,
)
from struct_auto_from.core.diagnostics import Diagnostic, DiagnosticAccumulator, Span
from struct_auto_from.core.enums import ClassKind, DirectiveKey
from struct_auto_from.core.exceptions import (
    AccumulatorStateError,
    AdapterError,
    AutoFromError,
    ConversionError,
    DiagnosticError,
)
from struct_auto_from.core.expressions import Constant, Expr
from struct_auto_from.core.introspection import describe_receiver
from struct_auto_from.core.registry import (
    ConverterRegistry,
    convert,
    default_registry,
    register_converter,
)
from struct_auto_from.mapping.expand import Expansion, expand

__all__ = [
    # Decorator
    "auto_from",
    "auto_from_attr",
    "AutoFromConfig",
    # Expressions
    "Expr",
    "Constant",
    # Conversion
    "ConverterRegistry",
    "convert",
    "default_registry",
    "register_converter",
    # Descriptions
    "RawAttribute",
    "FieldDescription",
    "ReceiverDescription",
    "describe_receiver",
    "Expansion",
    "expand",
    # Diagnostics
    "Diagnostic",
    "DiagnosticAccumulator",
    "Span",
    # Enums
    "ClassKind",
    "DirectiveKey",
    # Exceptions
    "AutoFromError",
    "DiagnosticError",
    "AccumulatorStateError",
    "ConversionError",
    "AdapterError",
]
