"""Opaque default-value payloads.

The resolution engine never evaluates these; it only threads them through to
code emission.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Expr:
    """Python expression source text.

    Emitted inline into the generated conversion, so it is evaluated on every
    conversion, in the namespace of the module that defines the receiver.
    """

    source: str

    def __str__(self) -> str:
        return self.source


@dataclass(frozen=True)
class Constant:
    """An already built object used as-is for every conversion."""

    value: Any


Expression = Union[Expr, Constant]
