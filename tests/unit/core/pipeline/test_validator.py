from __future__ import annotations

"""
Unit tests for the Configuration Validator.

Verifies default injection, type coercion with warnings, and strict-mode
rejection of malformed fields.
"""

from typing import Any, Dict

import pytest

from prompt4ai.core.pipeline.validator import validate_config
from prompt4ai.domain.config import get_default_config


def test_valid_config_passes_unchanged(mock_config_dict: Dict[str, Any]) -> None:
    cfg, warnings = validate_config(mock_config_dict)

    assert warnings == []
    assert cfg == mock_config_dict


def test_non_dict_returns_defaults_with_warning() -> None:
    cfg, warnings = validate_config(["not", "a", "dict"])

    assert cfg == get_default_config()
    assert len(warnings) == 1


def test_non_dict_strict_raises() -> None:
    with pytest.raises(TypeError):
        validate_config("nope", strict=True)


def test_missing_keys_are_filled_from_defaults() -> None:
    cfg, warnings = validate_config({"max_tree_depth": 3})

    assert warnings == []
    assert cfg["max_tree_depth"] == 3
    assert cfg["file_template"] == get_default_config()["file_template"]


def test_templates_keep_surrounding_whitespace() -> None:
    cfg, _ = validate_config({"file_template": "  {{file_content}}\n\n", "prompt_template": "\n"})

    assert cfg["file_template"] == "  {{file_content}}\n\n"
    assert cfg["prompt_template"] == "\n"


def test_blank_rule_file_name_falls_back() -> None:
    cfg, _ = validate_config({"rule_file_name": "   "})
    assert cfg["rule_file_name"] == ".gitignore"


@pytest.mark.parametrize(
    "raw, expected",
    [("yes", True), ("0", False), (1, True), ("False", False)],
)
def test_bool_coercion_warns(raw: Any, expected: bool) -> None:
    cfg, warnings = validate_config({"follow_symlinks": raw})

    assert cfg["follow_symlinks"] is expected
    assert len(warnings) == 1


def test_numeric_string_depth_is_coerced() -> None:
    cfg, warnings = validate_config({"max_tree_depth": "12"})

    assert cfg["max_tree_depth"] == 12
    assert warnings


@pytest.mark.parametrize("raw", [0, -3, "abc", True, 2.5])
def test_invalid_depth_falls_back(raw: Any) -> None:
    cfg, warnings = validate_config({"max_tree_depth": raw})

    assert cfg["max_tree_depth"] == 8
    assert warnings


def test_max_workers_none_is_allowed() -> None:
    cfg, warnings = validate_config({"max_workers": None})
    assert cfg["max_workers"] is None
    assert warnings == []


def test_invalid_max_workers_falls_back_to_none() -> None:
    cfg, warnings = validate_config({"max_workers": -1})
    assert cfg["max_workers"] is None
    assert warnings


def test_strategy_is_normalized() -> None:
    cfg, _ = validate_config({"ignore_strategy": " NEAREST "})
    assert cfg["ignore_strategy"] == "nearest"


def test_unknown_strategy_falls_back() -> None:
    cfg, warnings = validate_config({"ignore_strategy": "sometimes"})
    assert cfg["ignore_strategy"] == "any"
    assert warnings


@pytest.mark.parametrize(
    "override",
    [
        {"follow_symlinks": "yes"},
        {"max_tree_depth": "4"},
        {"ignore_strategy": "bogus"},
        {"file_template": 42},
    ],
)
def test_strict_mode_rejects_coercion(override: Dict[str, Any]) -> None:
    with pytest.raises(TypeError):
        validate_config(override, strict=True)
