"""The ``auto_from`` class decorator and the ``auto_from_attr`` field marker.

Usage::

    @auto_from(UserModel)
    @dataclass
    class UserType:
        id: Annotated[int, auto_from_attr("default_value = 42")]
        name: Annotated[str, auto_from_attr('from_field = "nom"')]
        email: str

    user = UserType.convert_from(user_model)
    user = convert(user_model, UserType)

All validation happens when the decorator runs. Either every conversion is
generated and attached, or a DiagnosticError listing every problem is raised
and the class is left untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from struct_auto_from.core.codegen import compile_plan
from struct_auto_from.core.config import DEFAULT_CONFIG, AutoFromConfig
from struct_auto_from.core.description import RawAttribute
from struct_auto_from.core.diagnostics import Diagnostic, DiagnosticAccumulator, Span
from struct_auto_from.core.exceptions import ConversionError
from struct_auto_from.core.introspection import apply_description, describe_receiver
from struct_auto_from.core.registry import ConverterRegistry, default_registry
from struct_auto_from.mapping.expand import Expansion, expand

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONVERSIONS_ATTR = "__auto_from__"
PLANS_ATTR = "__auto_from_plans__"


def auto_from_attr(*sources: Any, **keywords: Any) -> RawAttribute:
    """Field directive marker, placed in ``Annotated`` metadata.

    Accepts attribute-language strings, keyword arguments, or both::

        auto_from_attr('from_field = "nom", from_struct = Model2a')
        auto_from_attr(default_value=Expr("{}"), from_struct=Model2a)

    The payload is parsed when the class is decorated.
    """
    return RawAttribute(sources=sources, keywords=keywords)


def _convert_from(cls: type[T], value: Any) -> T:
    """Convert *value* into this class using the conversion for its type."""
    conversions = getattr(cls, CONVERSIONS_ATTR, {})
    for klass in type(value).__mro__:
        fn = conversions.get(klass)
        if fn is not None:
            return fn(value)
    raise ConversionError(type(value), cls, "no auto_from conversion declared")


def _expand_class(cls: Any, senders: tuple[Any, ...]) -> tuple[Expansion, dict[str, type]]:
    acc = DiagnosticAccumulator()
    receiver_span = Span(getattr(cls, "__name__", repr(cls)))

    names: list[str] = []
    sender_types: dict[str, type] = {}
    for sender in senders:
        if not isinstance(sender, type):
            acc.push(Diagnostic(f"expected a class, got {sender!r}", receiver_span))
            continue
        names.append(sender.__name__)
        sender_types.setdefault(sender.__name__, sender)

    description = acc.handle(describe_receiver, cls)
    if description is None:
        acc.finish()
    expansion = acc.handle(expand, description, names)
    return acc.finish_with(expansion), sender_types


def auto_from(
    *senders: type,
    config: AutoFromConfig | None = None,
    registry: ConverterRegistry | None = None,
) -> Callable[[type[T]], type[T]]:
    """Generate conversions into the decorated class from each of *senders*.

    Args:
        *senders: Sender classes. The first one is the default target of
            field directives without ``from_struct``.
        config: Expansion options.
        registry: Converter registry used for field conversions and in which
            the generated conversions are registered. Defaults to the
            package-wide registry.

    Raises:
        DiagnosticError: When the decorator is applied, with every problem found.
    """
    settings = config or DEFAULT_CONFIG
    target_registry = registry if registry is not None else default_registry

    def decorator(cls: type[T]) -> type[T]:
        expansion, sender_types = _expand_class(cls, senders)

        # compile everything before the class is touched
        acc = DiagnosticAccumulator()
        compiled: dict[str, Callable[[Any], Any]] = {}
        for sender_name, plan in expansion.plans.items():
            fn = acc.handle(
                compile_plan, plan, cls, target_registry, log_source=settings.log_source
            )
            if fn is not None:
                compiled[sender_name] = fn
        acc.finish()

        if settings.strip_directives:
            apply_description(cls, expansion.description, expansion.directive_fields)

        conversions: dict[type, Callable[[Any], Any]] = dict(cls.__dict__.get(CONVERSIONS_ATTR, {}))
        plans = dict(cls.__dict__.get(PLANS_ATTR, {}))
        for sender_name, plan in expansion.plans.items():
            sender = sender_types[sender_name]
            fn = compiled[sender_name]
            if sender in conversions:
                logger.warning("Replacing conversion %s -> %s", sender_name, cls.__name__)
            conversions[sender] = fn
            plans[sender_name] = plan
            if settings.register_conversions:
                target_registry.register(sender, cls, fn)
            logger.debug(
                "Generated conversion %s -> %s (%d read, %d default)",
                sender_name,
                cls.__name__,
                len(plan.reads),
                len(plan.defaults),
            )

        setattr(cls, CONVERSIONS_ATTR, conversions)
        setattr(cls, PLANS_ATTR, plans)
        if settings.method_name:
            setattr(cls, settings.method_name, classmethod(_convert_from))
        return cls

    return decorator
