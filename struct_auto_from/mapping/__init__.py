"""Mapping layer - parse directives, resolve field sources, plan conversions."""

from __future__ import annotations

from struct_auto_from.mapping.attribute import FieldDirective, parse_field_directives
from struct_auto_from.mapping.expand import Expansion, expand
from struct_auto_from.mapping.plan import (
    ConversionPlan,
    EvaluateDefault,
    ReadField,
    build_plan,
)
from struct_auto_from.mapping.resolver import (
    DefaultExpression,
    FromSenderField,
    MappingTable,
    resolve_mappings,
)

__all__ = [
    "FieldDirective",
    "parse_field_directives",
    "MappingTable",
    "FromSenderField",
    "DefaultExpression",
    "resolve_mappings",
    "ConversionPlan",
    "ReadField",
    "EvaluateDefault",
    "build_plan",
    "Expansion",
    "expand",
]
