"""Conversion plan data classes.

Frozen dataclasses representing the compiled, per-sender conversion: an
ordered list of field instructions handed to code emission.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from struct_auto_from.core.description import ReceiverDescription
from struct_auto_from.core.expressions import Expression
from struct_auto_from.mapping.resolver import DefaultExpression, MappingTable


@dataclass(frozen=True)
class ReadField:
    """Read ``source`` from the sender value and convert it into ``annotation``."""

    target: str
    keyword: str
    source: str
    annotation: Any = Any


@dataclass(frozen=True)
class EvaluateDefault:
    """Evaluate ``expression`` in place."""

    target: str
    keyword: str
    expression: Expression


Instruction = Union[ReadField, EvaluateDefault]


@dataclass(frozen=True)
class ConversionPlan:
    """Compiled conversion from one sender into the receiver."""

    receiver: str
    sender: str
    instructions: list[Instruction] = field(default_factory=list)

    @property
    def reads(self) -> list[str]:
        return [ins.source for ins in self.instructions if isinstance(ins, ReadField)]

    @property
    def defaults(self) -> list[str]:
        return [ins.target for ins in self.instructions if isinstance(ins, EvaluateDefault)]


def build_plan(table: MappingTable, description: ReceiverDescription) -> ConversionPlan:
    """Turn a MappingTable into an ordered ConversionPlan.

    Source field names are not checked against the sender: the engine only
    knows the sender's identifier, not its shape.
    """
    instructions: list[Instruction] = []
    for f in description.fields:
        entry = table[f.name]
        if isinstance(entry, DefaultExpression):
            instructions.append(EvaluateDefault(f.name, f.init_keyword, entry.expression))
        else:
            instructions.append(ReadField(f.name, f.init_keyword, entry.source_field, f.annotation))
    return ConversionPlan(receiver=description.name, sender=table.sender, instructions=instructions)
