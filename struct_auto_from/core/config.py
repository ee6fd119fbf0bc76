"""Expansion configuration.

AutoFromConfig is a Pydantic model for type-safe per-decoration options.
"""

from __future__ import annotations

import keyword

from pydantic import BaseModel, ConfigDict, field_validator


class AutoFromConfig(BaseModel):
    """Options for one ``auto_from`` expansion."""

    model_config = ConfigDict(frozen=True)

    method_name: str | None = "convert_from"
    register_conversions: bool = True
    strip_directives: bool = True
    log_source: bool = False

    @field_validator("method_name")
    @classmethod
    def _check_method_name(cls, value: str | None) -> str | None:
        if value is not None and (not value.isidentifier() or keyword.iskeyword(value)):
            raise ValueError(f"method_name must be a valid identifier, got {value!r}")
        return value


DEFAULT_CONFIG = AutoFromConfig()
