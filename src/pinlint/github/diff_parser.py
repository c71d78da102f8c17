"""Git diff parser - split unified diffs into per-file chunks of lines.

Parses the output of `git diff` (or the GitHub ``.diff`` media type) into
ChangedFile objects. Each DiffLine keeps its one-character marker in ``text``,
so ``+FROM node`` stays ``+FROM node`` for the rules to strip or use.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from pinlint.exceptions import DiffParseError

logger = logging.getLogger("pinlint.github")

DEV_NULL = "/dev/null"

_HUNK_HEADER = re.compile(r"@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_LINE_KINDS = {"+": "add", "-": "del", " ": "normal", "": "normal"}


@dataclass(frozen=True)
class DiffLine:
    """One line of a hunk: ``add``, ``del`` or ``normal`` (context)."""
    kind: str
    text: str


@dataclass
class DiffChunk:
    """A single hunk from a unified diff."""
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    changes: list[DiffLine] = field(default_factory=list)


@dataclass
class ChangedFile:
    """Changes to a single file."""
    path: str
    status: str = "modified"  # 'added', 'modified', 'deleted', 'renamed'
    old_path: str | None = None  # For renames
    chunks: list[DiffChunk] = field(default_factory=list)

    @property
    def is_deleted(self) -> bool:
        return not self.path or self.path == DEV_NULL

    @property
    def added_lines(self) -> int:
        return sum(1 for c in self.chunks for line in c.changes if line.kind == "add")

    @property
    def deleted_lines(self) -> int:
        return sum(1 for c in self.chunks for line in c.changes if line.kind == "del")


def _target_path(header: str) -> str:
    """Path from a ``+++``/``---`` header, without the ``a/``/``b/`` prefix."""
    target = header[4:].split("\t")[0].strip()
    if target == DEV_NULL:
        return DEV_NULL
    if target.startswith(("a/", "b/")):
        return target[2:]
    return target


def parse_diff(diff_text: str) -> list[ChangedFile]:
    """Parse unified diff text into structured ChangedFile objects."""
    files: list[ChangedFile] = []
    current_file: ChangedFile | None = None
    current_chunk: DiffChunk | None = None
    old_left = new_left = 0

    # Only "\n" separates diff lines; content may hold other line breaks
    for line in diff_text.split("\n"):
        line = line.removesuffix("\r")
        # Hunk body: consume exactly as many lines as the header announced
        if current_chunk is not None and (old_left > 0 or new_left > 0):
            if line.startswith("\\"):
                continue  # "\ No newline at end of file"
            kind = _LINE_KINDS.get(line[:1])
            if kind is not None:
                current_chunk.changes.append(DiffLine(kind=kind, text=line))
                if kind != "add":
                    old_left -= 1
                if kind != "del":
                    new_left -= 1
                continue
            logger.debug("Hunk ended early at line: %r", line)
            old_left = new_left = 0

        # New file header
        if line.startswith("diff --git"):
            if current_file:
                files.append(current_file)
            parts = line.split(" b/")
            path = parts[-1] if len(parts) > 1 else ""
            current_file = ChangedFile(path=path)
            current_chunk = None
            continue

        if current_file is None:
            continue

        # File status markers
        if line.startswith("new file"):
            current_file.status = "added"
        elif line.startswith("deleted file"):
            current_file.status = "deleted"
            current_file.path = DEV_NULL
        elif line.startswith("rename from"):
            current_file.old_path = line.split("rename from ")[-1]
            current_file.status = "renamed"
        elif line.startswith("rename to"):
            current_file.path = line.split("rename to ")[-1]
        elif line.startswith("--- "):
            pass  # Old file path, already captured
        elif line.startswith("+++ "):
            current_file.path = _target_path(line)
        elif line.startswith("@@"):
            match = _HUNK_HEADER.match(line)
            if not match:
                raise DiffParseError(f"Malformed hunk header in {current_file.path}: {line!r}")
            current_chunk = DiffChunk(
                old_start=int(match.group(1)),
                old_count=int(match.group(2) or "1"),
                new_start=int(match.group(3)),
                new_count=int(match.group(4) or "1"),
            )
            old_left, new_left = current_chunk.old_count, current_chunk.new_count
            current_file.chunks.append(current_chunk)

    if current_file:
        files.append(current_file)

    return files


def get_git_diff(root: Path, base: str = "main") -> str:
    """Get the git diff between the current branch and base."""
    try:
        result = subprocess.run(
            ["git", "diff", f"{base}...HEAD"],
            cwd=root,
            capture_output=True,
            text=True,
            timeout=30,
        )
        if result.returncode == 0:
            return result.stdout
        # Fallback: diff against base directly
        logger.debug("Three-dot diff against %s failed, diffing directly", base)
        result = subprocess.run(
            ["git", "diff", base],
            cwd=root,
            capture_output=True,
            text=True,
            timeout=30,
        )
        return result.stdout
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.warning("Could not run git diff against %s: %s", base, e)
        return ""
