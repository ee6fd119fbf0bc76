"""struct-auto-from exception hierarchy.

Decoration-time problems are collected as diagnostics and raised together as a
single DiagnosticError. Conversion-time failures of the value conversion
capability raise ConversionError.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from struct_auto_from.core.diagnostics import Diagnostic


class AutoFromError(Exception):
    """Base exception for all struct-auto-from errors."""


# --- Decoration time ---


class DiagnosticError(AutoFromError):
    """Raised when an expansion fails; carries every discovered diagnostic."""

    def __init__(self, diagnostics: Iterable[Diagnostic]) -> None:
        self.diagnostics: list[Diagnostic] = list(diagnostics)
        count = len(self.diagnostics)
        lines = "\n".join(f"  {diagnostic}" for diagnostic in self.diagnostics)
        super().__init__(f"{count} error{'s' if count != 1 else ''}:\n{lines}")

    @property
    def messages(self) -> list[str]:
        """Diagnostic messages, in the order they were reported."""
        return [diagnostic.message for diagnostic in self.diagnostics]


class AccumulatorStateError(AutoFromError):
    """Raised on use of a DiagnosticAccumulator that was already finished."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} accumulator in state '{current_state}'")


# --- Conversion time ---


class ConversionError(AutoFromError):
    """Raised when a value cannot be converted into a field's type."""

    def __init__(self, source_type: type, target: Any, detail: str | None = None) -> None:
        self.source_type = source_type
        self.target = target
        target_name = getattr(target, "__name__", None) or repr(target)
        message = f"Cannot convert '{source_type.__name__}' into '{target_name}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


# --- Adapter ---


class AdapterError(AutoFromError):
    """Raised when no class adapter can be loaded for a receiver."""
