from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of user preferences and prompt presets using JSON.
Missing or corrupted files fall back to defaults; unknown keys are merged
over the defaults so older files keep loading.
"""

import json
import logging
import os
import uuid
from typing import Any, Dict, List, Optional

from prompt4ai.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_FILE_TEMPLATE,
    DEFAULT_MAX_TREE_DEPTH,
    DEFAULT_PROMPT_TEMPLATE,
    DEFAULT_RULE_FILE_NAME,
    DEFAULT_TOKENIZER_ENCODING,
)
from prompt4ai.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration (Session State).

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Templates
        "file_template": DEFAULT_FILE_TEMPLATE,
        "prompt_template": DEFAULT_PROMPT_TEMPLATE,

        # Listing
        "ignore_strategy": "any",
        "rule_file_name": DEFAULT_RULE_FILE_NAME,
        "max_tree_depth": DEFAULT_MAX_TREE_DEPTH,
        "follow_symlinks": False,

        # Metrics
        "tokenizer_encoding": DEFAULT_TOKENIZER_ENCODING,
        "max_workers": None,
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default application state structure.

    Returns:
        Dict[str, Any]: The full JSON structure for config.json.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "last_session": get_default_config(),
        "saved_presets": [],
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state() -> Dict[str, Any]:
    """
    Load application state from disk.

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    state = get_default_app_state()

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return state

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return state

    if isinstance(data.get("last_session"), dict):
        state["last_session"].update(data["last_session"])
    if isinstance(data.get("saved_presets"), list):
        state["saved_presets"] = [p for p in data["saved_presets"] if isinstance(p, dict)]

    state["version"] = CURRENT_CONFIG_VERSION
    return state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
    """
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        state["version"] = CURRENT_CONFIG_VERSION
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Retrieve the active configuration (Last Session) directly.
    """
    state = load_app_state()
    defaults = get_default_config()
    defaults.update(state.get("last_session", {}))
    return defaults


def save_config(config: Dict[str, Any]) -> None:
    """
    Save the provided config as the 'last_session'.
    """
    state = load_app_state()
    state["last_session"] = config
    save_app_state(state)


# -----------------------------------------------------------------------------
# Prompt Presets
# -----------------------------------------------------------------------------
def list_presets() -> List[Dict[str, str]]:
    """Return every saved preset in insertion order."""
    return list(load_app_state()["saved_presets"])


def save_preset(name: str, file_template: str, prompt_template: str) -> Dict[str, str]:
    """
    Store a new named pair of templates.

    Args:
        name: Display name of the preset.
        file_template: Per-file template.
        prompt_template: Whole-prompt template.

    Returns:
        Dict[str, str]: The stored preset including its generated id.
    """
    state = load_app_state()
    preset = {
        "id": str(uuid.uuid4()),
        "name": name,
        "file_template": file_template,
        "prompt_template": prompt_template,
    }
    state["saved_presets"].append(preset)
    save_app_state(state)
    logger.info(f"Preset saved: {name}")
    return preset


def get_preset(key: str) -> Optional[Dict[str, str]]:
    """Find a preset by id, falling back to the first one with that name."""
    presets = list_presets()
    for preset in presets:
        if preset.get("id") == key:
            return preset
    for preset in presets:
        if preset.get("name") == key:
            return preset
    return None


def delete_preset(key: str) -> bool:
    """
    Remove a preset by id or name.

    Returns:
        bool: True if a preset was removed.
    """
    target = get_preset(key)
    if target is None:
        return False

    state = load_app_state()
    state["saved_presets"] = [p for p in state["saved_presets"] if p.get("id") != target["id"]]
    save_app_state(state)
    logger.info(f"Preset deleted: {target.get('name')}")
    return True
