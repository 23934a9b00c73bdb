from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema (sub-commands, flags, defaults) and the
translation of parsed namespaces into configuration overrides.
"""

import argparse
from typing import Any, Dict

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the prompt4ai CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="prompt4ai",
        description="Assemble LLM prompts from a selection of project files.",
    )

    # --- Global options ---
    p.add_argument("--debug", action="store_true", help="Elevate logging verbosity to DEBUG.")
    p.add_argument("--json", dest="json_output", action="store_true", help="Emit JSON instead of text.")
    p.add_argument(
        "--ignore-strategy",
        dest="ignore_strategy",
        choices=["any", "nearest"],
        default=None,
        help="How rule files at different levels combine (default: any).",
    )
    p.add_argument(
        "--boundary",
        dest="boundary_dir",
        default=None,
        help="Highest directory searched for rule files (default: working directory).",
    )
    p.add_argument("--use-defaults", action="store_true", help="Ignore the saved configuration.")
    p.add_argument(
        "--log-file",
        dest="log_file",
        nargs="?",
        const="",
        default=None,
        help="Also write logs to a rotating file (default location if no path is given).",
    )

    sub = p.add_subparsers(dest="command", required=True)

    # --- Listing ---
    ls = sub.add_parser("ls", help="List the immediate children of a directory.")
    ls.add_argument("directory")

    tree = sub.add_parser("tree", help="List a directory recursively.")
    tree.add_argument("directory")
    tree.add_argument("--max-depth", dest="max_tree_depth", type=int, default=None)
    tree.add_argument("--follow-symlinks", action="store_true")

    # --- Metrics ---
    metrics = sub.add_parser("metrics", help="Size, line and token counts of files.")
    metrics.add_argument("files", nargs="+")
    metrics.add_argument("--workers", dest="max_workers", type=int, default=None)

    # --- Prompt assembly ---
    prompt = sub.add_parser("prompt", help="Assemble a prompt from selected files.")
    prompt.add_argument("directory", help="Base directory of the selection.")
    prompt.add_argument("files", nargs="+", help="Selected files (relative to the base or absolute).")
    prompt.add_argument("--file-template", dest="file_template", default=None)
    prompt.add_argument("--prompt-template", dest="prompt_template", default=None)
    prompt.add_argument("--preset", default=None, help="Use the templates of a saved preset.")
    prompt.add_argument(
        "--include-binary",
        action="store_true",
        help="Keep files with known non-text extensions in the selection.",
    )
    prompt.add_argument("-o", "--output", dest="output_file", default=None, help="Write to a file.")

    # --- Diagnostics ---
    logs = sub.add_parser("logs", help="Show the tail of the log file.")
    logs.add_argument("-n", "--lines", dest="lines", type=int, default=100)

    # --- Presets ---
    presets = sub.add_parser("presets", help="Manage saved template presets.")
    presets_sub = presets.add_subparsers(dest="preset_command", required=True)
    presets_sub.add_parser("list", help="Show saved presets.")
    save = presets_sub.add_parser("save", help="Save a preset.")
    save.add_argument("name")
    save.add_argument("--file-template", dest="file_template", required=True)
    save.add_argument("--prompt-template", dest="prompt_template", required=True)
    delete = presets_sub.add_parser("delete", help="Delete a preset by id or name.")
    delete.add_argument("key")

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only values the user actually supplied are returned.
    """
    overrides: Dict[str, Any] = {}
    for key in (
            "ignore_strategy",
            "max_tree_depth",
            "max_workers",
            "file_template",
            "prompt_template",
    ):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value

    if getattr(args, "follow_symlinks", False):
        overrides["follow_symlinks"] = True

    return overrides
