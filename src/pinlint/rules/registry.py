"""Validator tables mapping file kinds to their version-pinning checks.

The tables are built once at import time and exposed read-only. There is no
runtime registration; adding a file kind means adding a row here.
"""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import PurePosixPath
from types import MappingProxyType

from pinlint.rules.matchers import (
    check_docker_compose,
    check_dockerfile,
    check_github_actions,
    check_java_dependencies,
    check_kubernetes_manifest,
    check_node_package,
    check_python_requirements,
    check_ruby_gems,
)

Check = Callable[[str], list[str]]

_BRACE_GROUP = re.compile(r"\{([^{}]*)\}")


@lru_cache(maxsize=None)
def expand_braces(pattern: str) -> tuple[str, ...]:
    """Expand shell-style brace alternation: ``*.y{a,}ml`` -> ``*.yaml``, ``*.yml``."""
    match = _BRACE_GROUP.search(pattern)
    if match is None:
        return (pattern,)

    head, tail = pattern[: match.start()], pattern[match.end():]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return tuple(expanded)


def matches_pattern(path: str, pattern: str) -> bool:
    """Check a path against a glob, trying both the full path and its basename."""
    name = PurePosixPath(path).name
    for candidate in expand_braces(pattern):
        if fnmatch.fnmatchcase(path, candidate) or fnmatch.fnmatchcase(name, candidate):
            return True
    return False


@dataclass(frozen=True)
class ValidatorSpec:
    """Which files a check applies to, and the check itself."""

    name: str
    extensions: tuple[str, ...]
    patterns: tuple[str, ...]
    check: Check

    def applies_to(self, path: str) -> bool:
        if any(path.endswith(ext) for ext in self.extensions):
            return True
        return any(matches_pattern(path, pattern) for pattern in self.patterns)


PACKAGE_VALIDATORS: Mapping[str, ValidatorSpec] = MappingProxyType({
    "node": ValidatorSpec(
        name="node",
        extensions=("package.json",),
        patterns=("package.json",),
        check=check_node_package,
    ),
    "python": ValidatorSpec(
        name="python",
        extensions=(".txt", ".pip"),
        patterns=("requirements.txt", "requirements/*.txt", "requirements/**.txt"),
        check=check_python_requirements,
    ),
    "ruby": ValidatorSpec(
        name="ruby",
        extensions=(".gemfile", ".gemspec"),
        patterns=("Gemfile", "Gemfile.lock"),
        check=check_ruby_gems,
    ),
    "java": ValidatorSpec(
        name="java",
        extensions=(".gradle", ".pom"),
        patterns=("build.gradle", "pom.xml"),
        check=check_java_dependencies,
    ),
})

CONTAINER_VALIDATORS: Mapping[str, ValidatorSpec] = MappingProxyType({
    "docker": ValidatorSpec(
        name="docker",
        extensions=("Dockerfile",),
        patterns=("Dockerfile", "**/Dockerfile", "docker/Dockerfile"),
        check=check_dockerfile,
    ),
    "kubernetes": ValidatorSpec(
        name="kubernetes",
        extensions=(".yaml", ".yml"),
        patterns=("k8s/*.y{a,}ml", "kubernetes/*.y{a,}ml"),
        check=check_kubernetes_manifest,
    ),
    "compose": ValidatorSpec(
        name="compose",
        extensions=(".yaml", ".yml"),
        patterns=("docker-compose.y{a,}ml",),
        check=check_docker_compose,
    ),
})

WORKFLOW_VALIDATORS: Mapping[str, ValidatorSpec] = MappingProxyType({
    "actions": ValidatorSpec(
        name="actions",
        extensions=(),
        patterns=(".github/workflows/*.y{a,}ml",),
        check=check_github_actions,
    ),
})

VALIDATOR_TABLES: Mapping[str, Mapping[str, ValidatorSpec]] = MappingProxyType({
    "package": PACKAGE_VALIDATORS,
    "container": CONTAINER_VALIDATORS,
    "workflow": WORKFLOW_VALIDATORS,
})


def validators_for(path: str) -> list[ValidatorSpec]:
    """All validators that apply to a path, in table order."""
    return [
        spec
        for table in VALIDATOR_TABLES.values()
        for spec in table.values()
        if spec.applies_to(path)
    ]
