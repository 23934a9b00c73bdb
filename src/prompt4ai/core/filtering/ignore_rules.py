from __future__ import annotations

"""
Cascading Ignore-Rule Engine.

Discovers per-directory exclusion files (.gitignore by default) from a target
directory upward to a boundary directory and evaluates candidate paths against
them. Each rule file is scoped to its own directory: a candidate is matched
against the path relative to that directory, and a path outside it is never
matched by it.

Two evaluation strategies are available:
- ANY: a path is excluded as soon as any level reports an ignore.
- NEAREST: levels are consulted from the target directory outward and the
  first level holding a verdict (ignore or re-include) decides.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Iterable, List, Optional, Union

import pathspec

from prompt4ai.domain.constants import DEFAULT_RULE_FILE_NAME
from prompt4ai.infra.fs import resolve_boundary_dir

logger = logging.getLogger(__name__)

_EMPTY_SPEC = pathspec.GitIgnoreSpec.from_lines([])


class IgnoreStrategy(str, Enum):
    """Combination policy across directory levels."""
    ANY = "any"
    NEAREST = "nearest"

    @classmethod
    def parse(cls, value: Union[str, "IgnoreStrategy", None]) -> "IgnoreStrategy":
        if isinstance(value, IgnoreStrategy):
            return value
        if not value:
            return cls.ANY
        return cls(str(value).strip().lower())


# -----------------------------------------------------------------------------
# RULE MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class IgnoreRule:
    """
    Compiled patterns of one rule file.

    Attributes:
        base_dir: Directory holding the rule file; patterns are relative to it.
        spec: Ordered gitignore patterns (empty if the file was unusable).
    """
    base_dir: str
    spec: pathspec.PathSpec

    def verdict(self, path: str, is_dir: bool) -> Optional[bool]:
        """
        Evaluate one candidate against this file's patterns.

        The last matching pattern wins: True means ignored, False means
        explicitly re-included by a negated pattern, None means no pattern
        applies (including paths outside base_dir).
        """
        rel = _relative_posix(path, self.base_dir)
        if not rel:
            return None
        if is_dir:
            rel += "/"

        result: Optional[bool] = None
        for pattern in self.spec.patterns:
            if pattern.include is None:
                continue
            if pattern.match_file(rel):
                result = bool(pattern.include)
        return result

    def matches(self, path: str, is_dir: bool) -> bool:
        return self.verdict(path, is_dir) is True


@dataclass(frozen=True)
class IgnoreRuleSet:
    """
    Rules discovered between a target directory and its boundary.

    Attributes:
        rules: Ordered from the target directory (closest) outward.
        strategy: Combination policy across levels.
    """
    rules: List[IgnoreRule]
    strategy: IgnoreStrategy = IgnoreStrategy.ANY

    def is_ignored(self, path: str, is_dir: bool) -> bool:
        """
        Decide whether a candidate path is excluded.

        Args:
            path: Absolute path of the candidate.
            is_dir: Whether the candidate is a directory (directory-only
                    patterns such as 'build/' only apply then).

        Returns:
            bool: True if the path must be omitted.
        """
        if self.strategy is IgnoreStrategy.NEAREST:
            for rule in self.rules:
                decided = rule.verdict(path, is_dir)
                if decided is not None:
                    return decided
            return False

        return any(rule.matches(path, is_dir) for rule in self.rules)

    def __len__(self) -> int:
        return len(self.rules)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def load_rule_file(rule_path: str) -> pathspec.GitIgnoreSpec:
    """
    Parse a single exclusion rule file.

    An unreadable, undecodable or malformed file yields an empty spec: a rule
    file that cannot be parsed is treated as absent.

    Args:
        rule_path: Absolute path to the rule file.

    Returns:
        pathspec.GitIgnoreSpec: Compiled patterns in file order.
    """
    try:
        with open(rule_path, "r", encoding="utf-8") as f:
            return pathspec.GitIgnoreSpec.from_lines(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unusable rule file '{rule_path}': {e}")
        return _EMPTY_SPEC


def build_rule_set(
        target_dir: str,
        boundary_dir: Optional[str] = None,
        strategy: Union[IgnoreStrategy, str, None] = IgnoreStrategy.ANY,
        rule_file_name: str = DEFAULT_RULE_FILE_NAME,
) -> IgnoreRuleSet:
    """
    Walk from 'target_dir' upward collecting rule files.

    The walk stops after the boundary directory or at the filesystem root,
    whichever comes first. Nothing is cached: every call rereads the files,
    so edits are always reflected.

    Args:
        target_dir: Directory whose children will be evaluated.
        boundary_dir: Upper limit (inclusive); defaults to the working directory.
        strategy: Combination policy across levels.
        rule_file_name: Name of the per-directory exclusion file.

    Returns:
        IgnoreRuleSet: Rules ordered from closest to farthest.
    """
    current = os.path.abspath(target_dir)
    boundary = os.path.abspath(boundary_dir) if boundary_dir else resolve_boundary_dir(current)

    rules: List[IgnoreRule] = []
    for level in _walk_up(current, boundary):
        rule_path = os.path.join(level, rule_file_name)
        if os.path.isfile(rule_path):
            rules.append(IgnoreRule(base_dir=level, spec=load_rule_file(rule_path)))

    logger.debug(f"Collected {len(rules)} rule file(s) for {current}")
    return IgnoreRuleSet(rules=rules, strategy=IgnoreStrategy.parse(strategy))

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _walk_up(start: str, boundary: str) -> Iterable[str]:
    """Yield 'start' and its ancestors up to 'boundary' or the root."""
    current = start
    while True:
        yield current
        parent = os.path.dirname(current)
        if current == boundary or parent == current:
            return
        current = parent


def _relative_posix(path: str, base_dir: str) -> str:
    """Lexical relative path in POSIX form, or '' when outside base_dir."""
    try:
        rel = PurePath(os.path.abspath(path)).relative_to(PurePath(base_dir))
    except ValueError:
        return ""
    posix = rel.as_posix()
    return "" if posix == "." else posix
