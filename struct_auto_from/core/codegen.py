"""Conversion code emission.

Renders a ConversionPlan as Python source and compiles it, in the manner of
``dataclasses`` building ``__init__``: an outer factory receives the helper
objects as parameters, the inner function closes over them, and the source is
executed against the receiver module's globals so default expressions resolve
names the way they would in the class body's module.
"""

from __future__ import annotations

import keyword
import logging
import sys
from collections.abc import Callable
from typing import Any

from struct_auto_from.core.diagnostics import Span, fail
from struct_auto_from.core.expressions import Constant
from struct_auto_from.core.registry import ConverterRegistry
from struct_auto_from.mapping.plan import ConversionPlan, EvaluateDefault, Instruction

logger = logging.getLogger(__name__)

_VALUE = "__auto_from_value"
_RECEIVER = "__auto_from_receiver"
_CONVERT = "__auto_from_convert"
_TYPES = "__auto_from_types"
_CONSTANTS = "__auto_from_constants"


def function_name(sender: str) -> str:
    name = f"from_{sender}"
    return name if name.isidentifier() else "from_sender"


def _is_keyword_arg(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def _value_source(ins: Instruction) -> str:
    if isinstance(ins, EvaluateDefault):
        if isinstance(ins.expression, Constant):
            return f"{_CONSTANTS}[{ins.target!r}]"
        source = ins.expression.source
        # a trailing comment would swallow the closing parenthesis
        return f"({source}\n)" if "#" in source else f"({source})"
    return f"{_CONVERT}({_VALUE}.{ins.source}, {_TYPES}[{ins.target!r}])"


def render_plan(plan: ConversionPlan) -> str:
    """Python source of the factory producing the conversion for *plan*."""
    name = function_name(plan.sender)
    arguments: list[str] = []
    packed: list[str] = []
    for ins in plan.instructions:
        value = _value_source(ins)
        if _is_keyword_arg(ins.keyword):
            arguments.append(f"{ins.keyword}={value}")
        else:
            packed.append(f"{ins.keyword!r}: {value}")
    if packed:
        arguments.append("**{" + ", ".join(packed) + "}")

    lines = [
        f"def __create_fn__({_RECEIVER}, {_CONVERT}, {_TYPES}, {_CONSTANTS}):",
        f"    def {name}({_VALUE}):",
        f"        return {_RECEIVER}(",
        *(f"            {argument}," for argument in arguments),
        "        )",
        f"    return {name}",
    ]
    return "\n".join(lines) + "\n"


def compile_plan(
    plan: ConversionPlan,
    receiver: type,
    registry: ConverterRegistry,
    *,
    log_source: bool = False,
) -> Callable[[Any], Any]:
    """Compile *plan* into a function converting a sender value into *receiver*.

    Raises:
        DiagnosticError: If the generated source does not compile.
    """
    source = render_plan(plan)
    try:
        code = compile(source, f"<auto_from {plan.receiver} from {plan.sender}>", "exec")
    except SyntaxError as e:
        raise fail(
            f"cannot compile conversion from `{plan.sender}`: {e.msg}", Span(plan.receiver)
        ) from None
    if log_source:
        logger.debug("Generated conversion %s -> %s:\n%s", plan.sender, plan.receiver, source)

    types: dict[str, Any] = {}
    constants: dict[str, Any] = {}
    for ins in plan.instructions:
        if isinstance(ins, EvaluateDefault):
            if isinstance(ins.expression, Constant):
                constants[ins.target] = ins.expression.value
        else:
            types[ins.target] = ins.annotation

    module = sys.modules.get(receiver.__module__)
    globals_ = module.__dict__ if module is not None else {}
    namespace: dict[str, Any] = {}
    exec(code, globals_, namespace)  # noqa: S102
    fn = namespace["__create_fn__"](receiver, registry.convert, types, constants)
    fn.__qualname__ = f"{receiver.__qualname__}.{fn.__name__}"
    fn.__doc__ = f"Convert a {plan.sender} into a {plan.receiver}."
    return fn
