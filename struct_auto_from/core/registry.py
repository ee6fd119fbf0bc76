"""Converter registry - the generic "convert a value into type T" capability.

Generated conversions call ``ConverterRegistry.convert`` for every field read
from a sender. The registry also stores the generated conversions themselves,
so a receiver field whose type is another ``auto_from`` receiver converts
transitively.
"""

from __future__ import annotations

import logging
import types
from collections.abc import Callable
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError

from struct_auto_from.core.exceptions import ConversionError

logger = logging.getLogger(__name__)

Converter = Callable[[Any], Any]

_UNION_ORIGINS: tuple[Any, ...] = (Union, types.UnionType)

# Lossless numeric widening.
_BUILTIN_CONVERTERS: dict[tuple[type, type], Converter] = {
    (int, float): float,
    (int, complex): complex,
    (float, complex): complex,
}


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    return isinstance(cls, type) and issubclass(cls, BaseModel)


def _runtime_class(target: Any) -> type | None:
    """Class usable with isinstance() for *target*, or None if it has none."""
    origin = get_origin(target)
    candidate = origin if origin is not None else target
    return candidate if isinstance(candidate, type) else None


class ConverterRegistry:
    """Maps ``(source type, target type)`` pairs to converter callables.

    Args:
        builtins: Register the numeric widening converters.
    """

    def __init__(self, *, builtins: bool = True) -> None:
        self._converters: dict[tuple[type, Any], Converter] = {}
        if builtins:
            self._converters.update(_BUILTIN_CONVERTERS)

    def register(
        self,
        source: type,
        target: Any,
        func: Converter | None = None,
    ) -> Any:
        """Register *func* as the converter from *source* into *target*.

        Usable as a decorator when *func* is omitted::

            @registry.register(Celsius, Fahrenheit)
            def _c_to_f(value: Celsius) -> Fahrenheit: ...
        """
        if func is None:

            def decorator(fn: Converter) -> Converter:
                self.register(source, target, fn)
                return fn

            return decorator

        key = (source, target)
        if key in self._converters and self._converters[key] is not func:
            logger.warning(
                "Replacing converter %s -> %s",
                source.__name__,
                getattr(target, "__name__", target),
            )
        self._converters[key] = func
        logger.debug(
            "Registered converter %s -> %s", source.__name__, getattr(target, "__name__", target)
        )
        return func

    def unregister(self, source: type, target: Any) -> None:
        """Remove a converter; missing pairs are ignored."""
        self._converters.pop((source, target), None)

    def lookup(self, source: type, target: Any) -> Converter | None:
        """Find a converter for *target*, walking the MRO of *source*."""
        for klass in source.__mro__:
            func = self._converters.get((klass, target))
            if func is not None:
                return func
        return None

    def __contains__(self, pair: tuple[type, Any]) -> bool:
        source, target = pair
        return self.lookup(source, target) is not None

    def __len__(self) -> int:
        return len(self._converters)

    def convert(self, value: Any, target: Any) -> Any:
        """Convert *value* into *target*.

        Resolution order:
        1. ``Any``, ``object`` and non-class targets (TypeVar, NewType, ...) pass through
        2. ``Annotated`` is unwrapped, unions try each arm
        3. Values that already are instances of the target pass through
        4. Registered converters (source MRO, then target origin)
        5. Pydantic model targets -> ``model_validate(from_attributes=True)``

        Raises:
            ConversionError: If no rule applies.
        """
        if target is Any or target is object:
            return value

        origin = get_origin(target)
        if origin is Annotated:
            return self.convert(value, get_args(target)[0])
        if origin in _UNION_ORIGINS:
            return self._convert_union(value, target)
        if origin is Literal:
            if value in get_args(target):
                return value
            raise ConversionError(type(value), target, f"{value!r} is not an allowed literal")

        klass = _runtime_class(target)
        if klass is None or isinstance(value, klass):
            return value

        func = self.lookup(type(value), target)
        if func is None and origin is not None:
            func = self.lookup(type(value), origin)
        if func is not None:
            return func(value)

        if _is_pydantic_model(klass):
            try:
                return klass.model_validate(value, from_attributes=True)
            except ValidationError as e:
                raise ConversionError(type(value), target, str(e)) from e

        raise ConversionError(type(value), target)

    def _convert_union(self, value: Any, target: Any) -> Any:
        arms = get_args(target)
        for arm in arms:
            if arm is Any:
                return value
            klass = _runtime_class(arm)
            if klass is None or isinstance(value, klass):
                return value
        for arm in arms:
            try:
                return self.convert(value, arm)
            except ConversionError:
                continue
        raise ConversionError(type(value), target)


default_registry = ConverterRegistry()


def convert(value: Any, target: Any) -> Any:
    """Convert *value* into *target* using the default registry."""
    return default_registry.convert(value, target)


def register_converter(source: type, target: Any, func: Converter | None = None) -> Any:
    """Register a converter in the default registry (decorator when *func* is omitted)."""
    return default_registry.register(source, target, func)
