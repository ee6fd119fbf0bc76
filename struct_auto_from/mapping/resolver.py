"""Mapping resolution.

Builds one MappingTable per sender: every receiver field is resolved either to
a field read from that sender or to a default expression.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Union

from struct_auto_from.core.expressions import Expression
from struct_auto_from.mapping.attribute import FieldDirective


@dataclass(frozen=True)
class FromSenderField:
    """Read ``source_field`` from the sender."""

    source_field: str


@dataclass(frozen=True)
class DefaultExpression:
    """Populate the field from an expression; the sender is not read."""

    expression: Expression


MappingEntry = Union[FromSenderField, DefaultExpression]


@dataclass(frozen=True)
class MappingTable:
    """Resolved mapping for one sender, in receiver declaration order."""

    sender: str
    entries: dict[str, MappingEntry]  # receiver field -> entry

    def __getitem__(self, field_name: str) -> MappingEntry:
        return self.entries[field_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def source_fields(self) -> list[str]:
        """Sender fields the conversion reads, in emission order."""
        return [
            entry.source_field
            for entry in self.entries.values()
            if isinstance(entry, FromSenderField)
        ]


def directive_entry(directive: FieldDirective) -> MappingEntry | None:
    """The entry a directive resolves to; ``from_field`` wins if both are set."""
    if directive.from_field is not None:
        return FromSenderField(directive.from_field)
    if directive.default_value is not None:
        return DefaultExpression(directive.default_value)
    return None


def resolve_mappings(
    fields: Sequence[str],
    senders: Sequence[str],
    directives: Mapping[str, Sequence[FieldDirective]],
) -> dict[str, MappingTable]:
    """Resolve every (sender, receiver field) pair.

    Each directive targets its own ``from_struct`` or, without one, the first
    sender. Pairs no directive targets fall back to reading the same-named
    field from the sender.

    Args:
        fields: Receiver field names in declaration order.
        senders: Deduplicated, non-empty sender identifiers.
        directives: Parsed directives per receiver field.

    Returns:
        One MappingTable per sender, keyed by sender identifier.
    """
    default_sender = senders[0]
    explicit: dict[str, dict[str, MappingEntry]] = {sender: {} for sender in senders}

    for name in fields:
        for directive in directives.get(name, ()):
            entry = directive_entry(directive)
            target = directive.sender(default_sender)
            if entry is None or target not in explicit:
                continue
            explicit[target].setdefault(name, entry)

    return {
        sender: MappingTable(
            sender=sender,
            entries={name: explicit[sender].get(name, FromSenderField(name)) for name in fields},
        )
        for sender in senders
    }
