from __future__ import annotations

"""
Glob Pattern Matching Engine.

Implements brace-alternation expansion and glob-to-regex translation used to
decide which project files are selected by default. Patterns are matched
against slash-normalized paths relative to the project root. Supports
integration with .gitignore rules.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from project2text.domain.constants import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_INCLUDE_PATTERNS
from project2text.domain.errors import MalformedPatternError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONFIGURATION DEFAULTS
# -----------------------------------------------------------------------------

def default_include_patterns() -> List[str]:
    """
    Get the default inclusion glob list.

    Returns:
        List[str]: A single match-everything glob.
    """
    return list(DEFAULT_INCLUDE_PATTERNS)


def default_exclude_patterns() -> List[str]:
    """
    Get the default exclusion glob list.

    Returns:
        List[str]: Globs for dependency folders and VCS metadata.
    """
    return list(DEFAULT_EXCLUDE_PATTERNS)

# -----------------------------------------------------------------------------
# PATH NORMALIZATION
# -----------------------------------------------------------------------------

def split_rel_path(path: str) -> List[str]:
    """
    Split a relative path into its non-empty segments.

    Both '/' and '\\' are treated as separators; '.' segments are dropped.
    """
    return [seg for seg in re.split(r"[\\/]", path or "") if seg and seg != "."]


def normalize_rel_path(path: str) -> str:
    """
    Normalize a relative path into its canonical slash-separated key.

    Args:
        path: Raw relative path (any separator style).

    Returns:
        str: Normalized key, e.g. '.\\src\\a.ts' -> 'src/a.ts'.
    """
    return "/".join(split_rel_path(path))

# -----------------------------------------------------------------------------
# BRACE EXPANSION
# -----------------------------------------------------------------------------

def expand_braces(pattern: str) -> List[str]:
    """
    Expand brace-alternation groups into concrete patterns.

    The leftmost top-level group is split on its top-level commas and each
    alternative is expanded recursively, so nested groups resolve as well:
    'a{b{c,d},e}f' -> ['abcf', 'abdf', 'aef']. An empty group '{}' yields a
    single empty alternative. Duplicates are dropped, keeping first
    occurrence order.

    Args:
        pattern: Glob pattern possibly containing '{...}' groups.

    Returns:
        List[str]: The expanded patterns ([pattern] when there are no braces).

    Raises:
        MalformedPatternError: If the braces are unbalanced.
    """
    _check_balanced(pattern)

    expanded: List[str] = []
    seen = set()
    for item in _expand(pattern):
        if item not in seen:
            seen.add(item)
            expanded.append(item)
    return expanded


def _check_balanced(pattern: str) -> None:
    """Reject stray closing braces and unclosed groups."""
    depth = 0
    for ch in pattern:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth < 0:
                raise MalformedPatternError(pattern, "unexpected '}'")
    if depth != 0:
        raise MalformedPatternError(pattern, "unclosed '{'")


def _expand(pattern: str) -> List[str]:
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    end = start
    for end in range(start, len(pattern)):
        ch = pattern[end]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                break

    prefix = pattern[:start]
    body = pattern[start + 1:end]
    suffix = pattern[end + 1:]

    results: List[str] = []
    for alternative in _split_top_level(body):
        results.extend(_expand(prefix + alternative.strip() + suffix))
    return results


def _split_top_level(body: str) -> List[str]:
    """Split a group body on commas that are not inside a nested group."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for ch in body:
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        current.append(ch)
    parts.append("".join(current))
    return parts

# -----------------------------------------------------------------------------
# GLOB TRANSLATION
# -----------------------------------------------------------------------------

def glob_to_regex(pattern: str, case_sensitive: bool = True) -> re.Pattern:
    """
    Translate a single (brace-free) glob into a compiled regex.

    Semantics:
    - '*' matches any run of characters except '/'.
    - '**' matches any run including '/'; '**/' matches zero or more
      leading directories and a trailing '/**' matches a directory and
      everything below it.
    - '?' matches one character except '/'.
    - '[...]' and '[!...]' are character classes.

    Args:
        pattern: Glob pattern without brace groups.
        case_sensitive: If False, compile with re.IGNORECASE.

    Returns:
        re.Pattern: Regex anchored at both ends.

    Raises:
        re.error: If a character class is invalid.
    """
    pat = pattern.replace("\\", "/")
    while pat.startswith("./"):
        pat = pat[2:]
    pat = pat.lstrip("/")

    suffix = ""
    if pat.endswith("/**"):
        pat = pat[:-3]
        suffix = "(?:/.*)?"

    parts: List[str] = []
    i, n = 0, len(pat)
    while i < n:
        c = pat[i]
        if c == "*":
            j = i
            while j < n and pat[j] == "*":
                j += 1
            if j - i == 1:
                parts.append("[^/]*")
            elif (i == 0 or pat[i - 1] == "/") and j < n and pat[j] == "/":
                parts.append("(?:.*/)?")
                j += 1
            else:
                parts.append(".*")
            i = j
        elif c == "?":
            parts.append("[^/]")
            i += 1
        elif c == "[":
            j = i + 1
            if j < n and pat[j] in "!^":
                j += 1
            if j < n and pat[j] == "]":
                j += 1
            while j < n and pat[j] != "]":
                j += 1
            if j >= n:
                parts.append(re.escape(c))
                i += 1
                continue
            stuff = pat[i + 1:j].replace("\\", "\\\\")
            if stuff[0] in "!^":
                stuff = "^" + stuff[1:]
            parts.append(f"[{stuff}]")
            i = j + 1
        else:
            parts.append(re.escape(c))
            i += 1

    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile("".join(parts) + suffix + r"\Z", flags)


def compile_globs(patterns: Iterable[str], case_sensitive: bool = True) -> List[re.Pattern]:
    """
    Brace-expand and compile a list of globs.

    Invalid character classes are discarded with a warning; brace errors are
    propagated to the caller.

    Args:
        patterns: Raw glob strings.
        case_sensitive: Case policy applied to every pattern.

    Returns:
        List[re.Pattern]: Compiled regex objects.

    Raises:
        MalformedPatternError: If any pattern has unbalanced braces.
    """
    compiled: List[re.Pattern] = []
    for raw in patterns:
        for pattern in expand_braces(raw):
            try:
                compiled.append(glob_to_regex(pattern, case_sensitive))
            except re.error as e:
                logger.warning(f"Discarding invalid glob '{pattern}': {e}")
    return compiled


def matches_any(rel_path: str, compiled_patterns: Sequence[re.Pattern]) -> bool:
    """
    Verify if a normalized path matches at least one compiled glob.

    Args:
        rel_path: Slash-normalized relative path.
        compiled_patterns: Pre-compiled regex objects.

    Returns:
        bool: True if any match is found.
    """
    return any(rx.match(rel_path) for rx in compiled_patterns)

# -----------------------------------------------------------------------------
# INCLUDE / EXCLUDE DECISION
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PathMatcher:
    """
    Compiled include/exclude pattern sets.

    Built once per tree rebuild so that each candidate path is tested
    without recompiling the globs.
    """
    include: Tuple[re.Pattern, ...]
    exclude: Tuple[re.Pattern, ...]

    @classmethod
    def from_patterns(
            cls,
            include: Optional[Sequence[str]],
            exclude: Optional[Sequence[str]],
            case_sensitive: bool = True,
    ) -> "PathMatcher":
        """
        Compile raw pattern lists. An empty include list means match-all.

        Raises:
            MalformedPatternError: If any pattern has unbalanced braces.
        """
        include_list = list(include or []) or default_include_patterns()
        return cls(
            include=tuple(compile_globs(include_list, case_sensitive)),
            exclude=tuple(compile_globs(exclude or [], case_sensitive)),
        )

    def matches(self, rel_path: str) -> bool:
        path = normalize_rel_path(rel_path)
        return matches_any(path, self.include) and not matches_any(path, self.exclude)


def is_included(
        rel_path: str,
        include: Optional[Sequence[str]],
        exclude: Optional[Sequence[str]],
        case_sensitive: bool = True,
) -> bool:
    """
    Decide whether a path is selected by default.

    A path is selected iff it matches at least one (brace-expanded) include
    pattern and none of the (brace-expanded) exclude patterns.

    Args:
        rel_path: Relative path, any separator style.
        include: Include globs; empty or None means ['**/*'].
        exclude: Exclude globs.
        case_sensitive: Case policy for both sets.

    Returns:
        bool: True if the path is selected.

    Raises:
        MalformedPatternError: If any pattern has unbalanced braces.
    """
    return PathMatcher.from_patterns(include, exclude, case_sensitive).matches(rel_path)

# -----------------------------------------------------------------------------
# GITIGNORE INTEGRATION
# -----------------------------------------------------------------------------

def load_gitignore_patterns(root_path: str) -> List[str]:
    """
    Parse a .gitignore file and translate its rules into exclude globs.

    Brace groups in rules are expanded. Negation rules are not supported
    and are skipped.

    Args:
        root_path: Directory containing the .gitignore file.

    Returns:
        List[str]: Equivalent glob strings (empty if the file is absent).
    """
    gitignore_path = os.path.join(root_path, ".gitignore")
    if not os.path.isfile(gitignore_path):
        return []

    globs: List[str] = []
    try:
        with open(gitignore_path, "r", encoding="utf-8", errors="replace") as f:
            lines = f.read().splitlines()
    except OSError as e:
        logger.warning(f"Could not read '{gitignore_path}': {e}")
        return []

    for line in lines:
        rule = line.strip()
        if not rule or rule.startswith("#"):
            continue
        try:
            alternatives = expand_braces(rule)
        except MalformedPatternError as e:
            logger.warning(f"Skipping .gitignore rule: {e}")
            continue
        for alt in alternatives:
            for glob in _gitignore_to_globs(alt):
                if glob not in globs:
                    globs.append(glob)

    return globs


def _gitignore_to_globs(rule: str) -> List[str]:
    """
    Helper to translate one gitignore rule into root-relative globs.

    Args:
        rule: Raw rule from .gitignore (braces already expanded).

    Returns:
        List[str]: Equivalent globs (empty when the rule is unsupported).
    """
    if rule.startswith("!"):
        logger.debug(f"Negated .gitignore rule not supported: {rule}")
        return []

    directory_only = rule.endswith("/")
    body = rule.rstrip("/")
    if not body:
        return []

    anchored = "/" in body
    body = body.lstrip("/")
    glob = body if anchored else f"**/{body}"

    if directory_only:
        return [f"{glob}/**"]
    if glob.endswith("/**"):
        return [glob]
    return [glob, f"{glob}/**"]
