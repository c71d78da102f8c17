"""Version-pinning matchers.

Each matcher takes the reconstructed text of one changed file and returns a
list of warning strings. Extraction is a single regex pass that collects every
match; nothing here resolves what a version specifier actually installs.

The matchers run on raw diff text, so most lines still carry their leading
`+`. The requirements pattern is anchored at line start and is applied to that
text as-is: the reported name keeps the `+`, and an added comment (`+# ...`)
or an added blank line (`+`) is reported as an unversioned requirement. Only
context lines, which start with a space, are skipped.

Two patterns are narrower than a plain "anything but the separator" class:
Gradle coordinates exclude whitespace and quotes from group and artifact, so
a match cannot start inside `implementation '` or run across lines, and the
`uses:` action name excludes whitespace, so a local `uses: ./` never runs on
into the next `@` further down the file.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger("pinlint.rules")

WARNING_MARKER = "⚠️"

_NODE_DEPENDENCY = re.compile(r'"([^"]+)":\s*"([^"]+)"')
_PYTHON_REQUIREMENT = re.compile(
    r"^([^=><~\s]+)\s*((?:[<>=~]{1,2}|\^)?\s*[0-9][^;\s]*)?",
    re.MULTILINE,
)
_RUBY_GEM = re.compile(r"""gem\s+['"]([^'"]+)['"]\s*,\s*['"]([^'"]+)['"]""")
_GRADLE_COORDINATE = re.compile(r"""([^:\s'"]+):([^:\s'"]+):([^'"\s]+)""")
_MAVEN_VERSION = re.compile(r"<version>([^<]+)</version>")
_DOCKER_FROM_LINE = re.compile(r"^FROM\s+[^\n]+", re.MULTILINE)
_DOCKER_FROM = re.compile(r"FROM\s+([^:\s]+)(?::([^\s]+))?")
_K8S_IMAGE = re.compile(r"image:\s*([^:\s]+)(?::([^\s]+))?")
_COMPOSE_IMAGE = re.compile(r"""image:\s*['"]?([^:\s'"]+)(?::([^\s'"]+))?['"]?""")
_ACTION_USES = re.compile(r"uses:\s+([^@\s]+)@([^\s]+)")

_BARE_MAJOR = re.compile(r"^\d+$")
_MAJOR_MINOR = re.compile(r"^\d+\.\d+$")
_ALPHA_ONLY = re.compile(r"^[a-zA-Z]+$")
_SEMVER_REF = re.compile(r"^v\d+\.\d+\.\d+$")

DOCKER_FLOATING_TAGS = frozenset({"latest", "stable", "rolling", "alpine"})
MAVEN_FLOATING_TOKENS = ("SNAPSHOT", "RELEASE", "LATEST")


def strip_added_markers(content: str) -> str:
    """Remove the leading ``+`` diff marker from every line."""
    return "\n".join(
        line[1:] if line.startswith("+") else line for line in content.split("\n")
    )


def check_node_package(content: str) -> list[str]:
    """Flag caret, tilde and wildcard ranges in package.json entries."""
    issues: list[str] = []
    for match in _NODE_DEPENDENCY.finditer(content):
        name, version = match.groups()
        if version.startswith("^") or version.startswith("~") or version == "*":
            issues.append(
                f"{WARNING_MARKER} Package `{name}` should use exact version instead of "
                f"`{version}`. Use exact version pinning for reproducible builds."
            )
    return issues


def check_python_requirements(content: str) -> list[str]:
    """Flag requirements without a version or with a range constraint.

    Runs on the unstripped text; see the module docstring for what that
    means for comments and blank lines.
    """
    issues: list[str] = []
    for match in _PYTHON_REQUIREMENT.finditer(content):
        name, version = match.groups()
        if not version or "~=" in version or ">" in version or "<" in version:
            issues.append(
                f"{WARNING_MARKER} Python package `{name}` should use exact version (==) "
                f"instead of `{version or 'unspecified'}`."
            )
    return issues


def check_ruby_gems(content: str) -> list[str]:
    issues: list[str] = []
    for match in _RUBY_GEM.finditer(content):
        name, version = match.groups()
        if "~>" in version or ">" in version or "<" in version:
            issues.append(
                f"{WARNING_MARKER} Ruby gem `{name}` should use exact version instead of "
                f"`{version}`."
            )
    return issues


def check_java_dependencies(content: str) -> list[str]:
    """Flag dynamic Gradle versions and Maven snapshot/release aliases."""
    issues: list[str] = []

    for match in _GRADLE_COORDINATE.finditer(content):
        group, artifact, version = match.groups()
        if "+" in version or version.endswith(".+") or "latest" in version:
            issues.append(
                f"{WARNING_MARKER} Gradle dependency `{group}:{artifact}` should use exact "
                f"version instead of `{version}`."
            )

    for match in _MAVEN_VERSION.finditer(content):
        version = match.group(1)
        if any(token in version for token in MAVEN_FLOATING_TOKENS):
            issues.append(
                f"{WARNING_MARKER} Maven dependency should use exact version instead of "
                f"`{version}`."
            )
    return issues


def check_dockerfile(content: str) -> list[str]:
    """Flag FROM lines with a missing or floating tag.

    Bare majors, ``major.minor`` pairs and purely alphabetic tags count as
    floating here, which is stricter than the Kubernetes and Compose checks.
    """
    issues: list[str] = []
    from_lines = _DOCKER_FROM_LINE.findall(strip_added_markers(content))
    logger.debug("Found %d FROM line(s)", len(from_lines))

    for from_line in from_lines:
        match = _DOCKER_FROM.match(from_line)
        if not match:
            continue

        image, tag = match.groups()
        logger.debug("Analyzing image %s, tag %s", image, tag)

        if not tag:
            issues.append(
                f"{WARNING_MARKER} Docker image `{image}` has no version tag specified. "
                "Use specific version tags for reproducible builds."
            )
        elif (
            tag in DOCKER_FLOATING_TAGS
            or _BARE_MAJOR.match(tag)
            or _MAJOR_MINOR.match(tag)
            or _ALPHA_ONLY.match(tag)
        ):
            issues.append(
                f"{WARNING_MARKER} Docker image `{image}:{tag}` uses non-specific tag. "
                "Use complete version numbers (e.g., '20.5.0-alpine3.18')."
            )
    return issues


def _is_floating_image_tag(tag: str | None) -> bool:
    return not tag or tag == "latest" or bool(_BARE_MAJOR.match(tag) or _MAJOR_MINOR.match(tag))


def check_kubernetes_manifest(content: str) -> list[str]:
    issues: list[str] = []
    for match in _K8S_IMAGE.finditer(content):
        image, tag = match.groups()
        if _is_floating_image_tag(tag):
            issues.append(
                f"{WARNING_MARKER} Kubernetes container `{image}` should use specific version "
                f"tag instead of `{tag or 'latest'}`."
            )
    return issues


def check_docker_compose(content: str) -> list[str]:
    issues: list[str] = []
    for match in _COMPOSE_IMAGE.finditer(content):
        image, tag = match.groups()
        if _is_floating_image_tag(tag):
            issues.append(
                f"{WARNING_MARKER} Docker Compose service `{image}` should use specific "
                f"version tag instead of `{tag or 'latest'}`."
            )
    return issues


def check_github_actions(content: str) -> list[str]:
    """Flag ``uses:`` references that are not pinned to ``vMAJOR.MINOR.PATCH``."""
    issues: list[str] = []
    for match in _ACTION_USES.finditer(content):
        action, ref = match.groups()
        if ref in ("main", "master") or not _SEMVER_REF.match(ref):
            issues.append(
                f"{WARNING_MARKER} GitHub Action `{action}` should use exact version "
                f"(e.g., v1.2.3) instead of `{ref}`. Use specific versions for "
                "reproducible workflows."
            )
    return issues
