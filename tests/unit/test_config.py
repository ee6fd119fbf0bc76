"""Unit tests for AutoFromConfig."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, ValidationError

from struct_auto_from.core.config import DEFAULT_CONFIG, AutoFromConfig


class TestAutoFromConfig:
    def test_defaults(self) -> None:
        assert DEFAULT_CONFIG.method_name == "convert_from"
        assert DEFAULT_CONFIG.register_conversions is True
        assert DEFAULT_CONFIG.strip_directives is True
        assert DEFAULT_CONFIG.log_source is False

    def test_custom_method_name(self) -> None:
        assert AutoFromConfig(method_name="from_model").method_name == "from_model"

    def test_method_disabled(self) -> None:
        assert AutoFromConfig(method_name=None).method_name is None

    @pytest.mark.parametrize("name", ["not valid", "class", ""])
    def test_invalid_method_name(self, name: str) -> None:
        with pytest.raises(ValidationError):
            AutoFromConfig(method_name=name)

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            DEFAULT_CONFIG.register_conversions = False  # type: ignore[misc]

    def test_fields_do_not_shadow_base_model(self) -> None:
        for name in AutoFromConfig.model_fields:
            assert not hasattr(BaseModel, name), name
