from __future__ import annotations

"""
Configuration Validation Service.

Ensures the configuration dictionary conforms to the expected schema before
it reaches the listing, metrics and assembly services. Handles type coercion
and default injection; strict mode turns every coercion into a TypeError.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from prompt4ai.core.filtering.ignore_rules import IgnoreStrategy
from prompt4ai.domain.config import get_default_config

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and a
                                          list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # Templates are kept verbatim: surrounding whitespace is meaningful
    for field in ("file_template", "prompt_template"):
        merged[field] = _as_template(merged.get(field), defaults[field], field, warnings, strict)

    for field in ("rule_file_name", "tokenizer_encoding"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["follow_symlinks"] = _as_bool(
        merged.get("follow_symlinks"), defaults["follow_symlinks"], "follow_symlinks", warnings, strict
    )
    merged["max_tree_depth"] = _as_positive_int(
        merged.get("max_tree_depth"), defaults["max_tree_depth"], "max_tree_depth", warnings, strict
    )
    merged["max_workers"] = _as_optional_positive_int(
        merged.get("max_workers"), "max_workers", warnings, strict
    )
    merged["ignore_strategy"] = _as_strategy(
        merged.get("ignore_strategy"), defaults["ignore_strategy"], warnings, strict
    )

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _reject(msg: str, warnings: List[str], strict: bool) -> None:
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")


def _as_template(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    if value is None:
        return fallback
    if isinstance(value, str):
        return value
    _reject(f"Invalid field '{field}': expected str, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback
    _reject(f"Invalid field '{field}': expected str, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    _reject(f"Invalid field '{field}': expected bool, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_positive_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    if value is None:
        return fallback
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    if not strict and isinstance(value, str) and value.strip().isdigit() and int(value) > 0:
        warnings.append(f"Field '{field}' converted from '{value}' to int.")
        return int(value)
    _reject(f"Invalid field '{field}': expected positive int, received {value!r}.", warnings, strict)
    return fallback


def _as_optional_positive_int(value: Any, field: str, warnings: List[str], strict: bool) -> Optional[int]:
    if value is None:
        return None
    return _as_positive_int(value, None, field, warnings, strict)  # type: ignore[arg-type]


def _as_strategy(value: Any, fallback: str, warnings: List[str], strict: bool) -> str:
    try:
        return IgnoreStrategy.parse(value).value
    except (ValueError, TypeError):
        choices = ", ".join(s.value for s in IgnoreStrategy)
        _reject(f"Invalid field 'ignore_strategy': {value!r} (choices: {choices}).", warnings, strict)
        return fallback
