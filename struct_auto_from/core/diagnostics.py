"""Diagnostics and the diagnostic accumulator.

Validation never stops at the first problem: every independent mistake is
pushed into a DiagnosticAccumulator, and the accumulator decides once, at the
end of the pass, whether the pass succeeded.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from struct_auto_from.core.exceptions import AccumulatorStateError, DiagnosticError

T = TypeVar("T")


@dataclass(frozen=True)
class Span:
    """Where a diagnostic was found.

    Attributes:
        location: Receiver name, or ``Receiver.field`` for field-level problems.
        attribute: 0-based index of the ``auto_from_attr`` occurrence on the field.
        offset: Character offset inside the attribute text.
        key: Keyword argument name, for keyword-form directives.
    """

    location: str
    attribute: int | None = None
    offset: int | None = None
    key: str | None = None

    def at_attribute(self, index: int) -> Span:
        return dataclasses.replace(self, attribute=index, offset=None, key=None)

    def at_offset(self, offset: int) -> Span:
        return dataclasses.replace(self, offset=offset)

    def at_key(self, key: str) -> Span:
        return dataclasses.replace(self, key=key)

    def __str__(self) -> str:
        parts = [self.location]
        if self.attribute is not None:
            parts.append(f"auto_from_attr #{self.attribute + 1}")
        if self.offset is not None:
            parts.append(f"column {self.offset}")
        if self.key is not None:
            parts.append(f"keyword '{self.key}'")
        return ", ".join(parts)


@dataclass(frozen=True)
class Diagnostic:
    """A single validation failure."""

    message: str
    span: Span | None = None

    def __str__(self) -> str:
        if self.span is None:
            return self.message
        return f"{self.span}: {self.message}"


def fail(message: str, span: Span | None = None) -> DiagnosticError:
    """Build a DiagnosticError holding one diagnostic."""
    return DiagnosticError([Diagnostic(message, span)])


class _AccState(Enum):
    OPEN = "open"
    FINISHED = "finished"


class DiagnosticAccumulator:
    """Write-only collector of diagnostics for one expansion pass.

    The accumulator is single use: once ``finish``/``finish_with`` has been
    called, any further call raises AccumulatorStateError.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []
        self._state = _AccState.OPEN

    def _ensure_open(self, action: str) -> None:
        if self._state is not _AccState.OPEN:
            raise AccumulatorStateError(self._state.value, action)

    def push(self, diagnostic: Diagnostic) -> None:
        """Record one diagnostic."""
        self._ensure_open("push to")
        self._diagnostics.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        """Record several diagnostics, keeping their order."""
        self._ensure_open("push to")
        self._diagnostics.extend(diagnostics)

    def push_error(self, error: DiagnosticError) -> None:
        """Absorb every diagnostic carried by *error*."""
        self.extend(error.diagnostics)

    def handle(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T | None:
        """Call *func*, absorbing a DiagnosticError it raises.

        Returns the call's result on success and ``None`` on failure.
        Exceptions other than DiagnosticError propagate.
        """
        self._ensure_open("handle results with")
        try:
            return func(*args, **kwargs)
        except DiagnosticError as err:
            self.push_error(err)
            return None

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    @property
    def has_errors(self) -> bool:
        return bool(self._diagnostics)

    @property
    def is_finished(self) -> bool:
        return self._state is _AccState.FINISHED

    def __len__(self) -> int:
        return len(self._diagnostics)

    def finish_with(self, value: T) -> T:
        """Terminate the pass.

        Returns *value* when nothing was pushed. Otherwise raises
        DiagnosticError with every pushed diagnostic and *value* is discarded.
        """
        self._ensure_open("finish")
        self._state = _AccState.FINISHED
        if self._diagnostics:
            raise DiagnosticError(self._diagnostics)
        return value

    def finish(self) -> None:
        """Terminate the pass without a value."""
        self.finish_with(None)
