from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Thin wrapper over the core services: bootstraps logging, resolves the
configuration (defaults, persistent storage, CLI overrides), dispatches the
sub-command and renders its result as text or JSON on stdout.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from prompt4ai.core.pipeline.assembler import build_prompt
from prompt4ai.core.pipeline.validator import validate_config
from prompt4ai.core.processing.tokenizer import get_tokenizer
from prompt4ai.core.services.lister import list_children, list_tree
from prompt4ai.core.services.metrics import collect_metrics
from prompt4ai.domain import config as config_store
from prompt4ai.domain.constants import is_blocked_extension
from prompt4ai.domain.metrics_models import MetricsCollectionError
from prompt4ai.domain.prompt_models import PromptAssemblyError
from prompt4ai.domain.tree_models import FileSelection, PathEntry
from prompt4ai.infra.fs import normalize_path
from prompt4ai.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
    get_recent_logs,
)
from prompt4ai.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 on operation failure, 2 on bad input,
             130 when interrupted.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_file = _resolve_log_file(args.log_file)
    configure_logging(LoggingConfig(
        level="DEBUG" if args.debug else "WARNING",
        console=True,
        log_file=log_file if args.command != "logs" else None,
    ))

    base_conf = config_store.get_default_config() if args.use_defaults else config_store.load_config()
    raw_conf = dict(base_conf)
    raw_conf.update(cli_args.args_to_overrides(args))
    conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    handlers = {
        "ls": _cmd_ls,
        "tree": _cmd_tree,
        "metrics": _cmd_metrics,
        "prompt": _cmd_prompt,
        "presets": _cmd_presets,
        "logs": _cmd_logs,
    }

    try:
        return handlers[args.command](args, conf)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130

# -----------------------------------------------------------------------------
# SUB-COMMANDS
# -----------------------------------------------------------------------------

def _cmd_ls(args: Any, conf: Dict[str, Any]) -> int:
    directory = normalize_path(args.directory, os.getcwd())
    if not os.path.isdir(directory):
        print(f"ERROR: not a directory: {directory}", file=sys.stderr)
        return 2

    entries = list_children(
        directory,
        boundary_dir=args.boundary_dir,
        strategy=conf["ignore_strategy"],
        rule_file_name=conf["rule_file_name"],
    )
    _print_entries(entries, args.json_output)
    return 0


def _cmd_tree(args: Any, conf: Dict[str, Any]) -> int:
    directory = normalize_path(args.directory, os.getcwd())
    if not os.path.isdir(directory):
        print(f"ERROR: not a directory: {directory}", file=sys.stderr)
        return 2

    entries = list_tree(
        directory,
        max_depth=conf["max_tree_depth"],
        follow_symlinks=conf["follow_symlinks"],
        boundary_dir=args.boundary_dir,
        strategy=conf["ignore_strategy"],
        rule_file_name=conf["rule_file_name"],
    )
    _print_entries(entries, args.json_output)
    return 0


def _cmd_metrics(args: Any, conf: Dict[str, Any]) -> int:
    paths = [os.path.abspath(f) for f in args.files]
    try:
        metrics = collect_metrics(
            paths,
            max_workers=conf["max_workers"],
            tokenizer=get_tokenizer(conf["tokenizer_encoding"]),
        )
    except MetricsCollectionError as e:
        for failure in e.failures:
            print(f"ERROR: {failure.file_path}: {failure.error}", file=sys.stderr)
        return 1

    if args.json_output:
        print(json.dumps([m.to_dict() for m in metrics], ensure_ascii=False, indent=2))
        return 0

    for m in metrics:
        flag = "" if m.is_valid else "  (not text)"
        print(f"{m.size:>10}  {m.line_count:>7} lines  {m.token_count:>8} tokens  {m.file_path}{flag}")
    print(f"Total tokens: {sum(m.token_count for m in metrics):,}")
    return 0


def _cmd_prompt(args: Any, conf: Dict[str, Any]) -> int:
    file_template = conf["file_template"]
    prompt_template = conf["prompt_template"]

    if args.preset:
        preset = config_store.get_preset(args.preset)
        if preset is None:
            print(f"ERROR: unknown preset: {args.preset}", file=sys.stderr)
            return 2
        file_template = args.file_template if args.file_template is not None else preset["file_template"]
        prompt_template = args.prompt_template if args.prompt_template is not None else preset["prompt_template"]

    base_dir = normalize_path(args.directory, os.getcwd())
    selections: List[FileSelection] = []
    for f in args.files:
        path = f if os.path.isabs(f) else os.path.join(base_dir, f)
        path = os.path.normpath(path)
        if not args.include_binary and is_blocked_extension(path):
            logger.info(f"Dropping non-text file from selection: {path}")
            continue
        selections.append(FileSelection(name=os.path.basename(path), path=path))

    try:
        result = build_prompt(base_dir, selections, file_template, prompt_template)
    except PromptAssemblyError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    for skipped in result.skipped_files:
        print(f"WARNING: skipped unreadable file: {skipped}", file=sys.stderr)

    if args.output_file:
        try:
            with open(args.output_file, "w", encoding="utf-8", newline="") as out:
                out.write(result.text)
        except OSError as e:
            print(f"ERROR: cannot write '{args.output_file}': {e}", file=sys.stderr)
            return 1
        print(f"Prompt written to {args.output_file}")
    elif args.json_output:
        print(json.dumps({
            "text": result.text,
            "tree": result.tree_text,
            "included_files": result.included_files,
            "skipped_files": result.skipped_files,
        }, ensure_ascii=False, indent=2))
    else:
        sys.stdout.write(result.text)
    return 0


def _cmd_presets(args: Any, conf: Dict[str, Any]) -> int:
    if args.preset_command == "save":
        preset = config_store.save_preset(args.name, args.file_template, args.prompt_template)
        print(preset["id"])
        return 0

    if args.preset_command == "delete":
        if not config_store.delete_preset(args.key):
            print(f"ERROR: unknown preset: {args.key}", file=sys.stderr)
            return 2
        return 0

    presets = config_store.list_presets()
    if args.json_output:
        print(json.dumps(presets, ensure_ascii=False, indent=2))
    else:
        for preset in presets:
            print(f"{preset.get('id')}  {preset.get('name')}")
    return 0


def _cmd_logs(args: Any, conf: Dict[str, Any]) -> int:
    sys.stdout.write(get_recent_logs(args.lines, _resolve_log_file(args.log_file)))
    return 0


def _resolve_log_file(raw: Optional[str]) -> Optional[str]:
    """None disables file logging; an empty value selects the default location."""
    if raw is None:
        return None
    return normalize_path(raw, get_default_log_path())

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _print_entries(entries: List[PathEntry], as_json: bool) -> None:
    if as_json:
        print(json.dumps([e.to_dict() for e in entries], ensure_ascii=False, indent=2))
        return
    _print_entry_lines(entries, indent="")


def _print_entry_lines(entries: List[PathEntry], indent: str) -> None:
    for entry in entries:
        suffix = "/" if entry.is_dir else ""
        marker = " ..." if entry.truncated else ""
        print(f"{indent}{entry.name}{suffix}{marker}")
        if entry.children:
            _print_entry_lines(entry.children, indent + "  ")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
