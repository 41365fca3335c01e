"""Path rules deciding what the context builder skips, fetches first, or samples.

``is_ignored``, ``is_priority_file`` and ``matches_source_pattern`` classify a
single path. The builder selects with ``find_priority_path`` and
``source_pattern_matches``, which apply the same predicates to a candidate list.
"""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

from readme_wtf import config


@dataclass(frozen=True)
class ClassifierRules:
    ignore_patterns: tuple[re.Pattern, ...]
    priority_files: tuple[str, ...]
    source_patterns: tuple[re.Pattern, ...]

    @classmethod
    def from_strings(
        cls,
        ignore_patterns: tuple[str, ...],
        priority_files: tuple[str, ...],
        source_patterns: tuple[str, ...],
    ) -> "ClassifierRules":
        return cls(
            ignore_patterns=tuple(re.compile(p) for p in ignore_patterns),
            priority_files=tuple(priority_files),
            source_patterns=tuple(re.compile(p) for p in source_patterns),
        )


DEFAULT_RULES = ClassifierRules.from_strings(
    config.IGNORE_PATTERNS,
    config.PRIORITY_FILES,
    config.SOURCE_PATTERNS,
)


def basename(path: str) -> str:
    return PurePosixPath(path).name


def is_ignored(path: str, rules: ClassifierRules = DEFAULT_RULES) -> bool:
    return any(pattern.search(path) for pattern in rules.ignore_patterns)


def is_named(path: str, filename: str) -> bool:
    """True if ``path`` is ``filename`` or ends in ``/filename``."""
    return path == filename or path.endswith(f"/{filename}")


def matches(path: str, pattern: re.Pattern) -> bool:
    return pattern.search(path) is not None


def is_priority_file(path: str, rules: ClassifierRules = DEFAULT_RULES) -> bool:
    return any(is_named(path, filename) for filename in rules.priority_files)


def matches_source_pattern(path: str, rules: ClassifierRules = DEFAULT_RULES) -> bool:
    return any(matches(path, pattern) for pattern in rules.source_patterns)


def find_priority_path(filename: str, candidates: list[str]) -> str | None:
    return next((path for path in candidates if is_named(path, filename)), None)


def source_pattern_matches(pattern: re.Pattern, candidates: list[str], limit: int) -> list[str]:
    return [path for path in candidates if matches(path, pattern)][:limit]
