"""One expansion pass: receiver description + senders -> conversion plans.

Either every conversion plan is produced or a DiagnosticError listing every
problem is raised; there is no partial result.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from struct_auto_from.core.description import ReceiverDescription
from struct_auto_from.core.diagnostics import Diagnostic, DiagnosticAccumulator, fail
from struct_auto_from.mapping.attribute import FieldDirective, parse_field_directives
from struct_auto_from.mapping.plan import ConversionPlan, build_plan
from struct_auto_from.mapping.resolver import MappingTable, resolve_mappings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Expansion:
    """Result of a successful pass."""

    description: ReceiverDescription  # directives stripped
    tables: dict[str, MappingTable] = field(default_factory=dict)
    plans: dict[str, ConversionPlan] = field(default_factory=dict)
    directive_fields: tuple[str, ...] = ()  # fields whose markers were stripped


def expand(description: ReceiverDescription, senders: Sequence[str]) -> Expansion:
    """Resolve and plan every conversion into *description*.

    Args:
        description: The receiver, directives included.
        senders: Sender identifiers as declared; the first is the default sender.

    Raises:
        DiagnosticError: With every structural, directive and reference problem.
    """
    if not senders:
        raise fail("at least one `from` struct must be specified", description.span)

    acc = DiagnosticAccumulator()

    for index, sender in enumerate(senders):
        if sender in senders[index + 1 :]:
            acc.push(Diagnostic(f"duplicate identifier `{sender}`", description.span))

    unique = list(dict.fromkeys(senders))
    directives: dict[str, list[FieldDirective]] = {}
    for f in description.fields:
        if not f.has_directives:
            continue
        parsed = acc.handle(parse_field_directives, f, unique)
        if parsed is not None:
            directives[f.name] = parsed

    tables = resolve_mappings(description.field_names, unique, directives)
    plans = {sender: build_plan(table, description) for sender, table in tables.items()}

    expansion = acc.finish_with(
        Expansion(
            description=description.strip_directives(),
            tables=tables,
            plans=plans,
            directive_fields=tuple(directives),
        )
    )
    logger.debug(
        "Expanded %s from %s (%d field(s) with directives)",
        description.name,
        ", ".join(unique),
        len(directives),
    )
    return expansion
