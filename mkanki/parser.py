"""
Markdown note parsing.

Splits markdown files into notes: every "## Header" line starts a new
note and the lines below it, up to the next "## " header, form its body.
Blank lines and single-line HTML comments are dropped, and anything
before the first header is ignored.
"""

from __future__ import annotations

import glob
import os
import re
from dataclasses import dataclass
from pathlib import Path

from .config import discover_md_files

HEADER_PATTERN = re.compile(r'^##\s+(.+)')
COMMENT_PATTERN = re.compile(r'^\s*<!--.*?-->\s*$')


@dataclass(frozen=True)
class NoteFields:
    """A "## Header" section: the header text and its raw body lines."""
    header: str
    body_lines: tuple[str, ...] = ()

    @property
    def body_text(self) -> str:
        return "\n".join(self.body_lines)


def parse_md(content: str) -> list[NoteFields]:
    """Scan markdown text into notes, in order of appearance."""
    notes = []
    header = None
    body_lines: list[str] = []

    # Only \n ends a line; form feeds and unicode separators stay in the body
    for line in content.split("\n"):
        line = line.removesuffix("\r")
        line_trimmed = line.strip()

        if not line_trimmed or COMMENT_PATTERN.match(line_trimmed):
            continue

        match = HEADER_PATTERN.match(line_trimmed)
        if match:
            if header is not None:
                notes.append(NoteFields(header, tuple(body_lines)))
            header = match.group(1)
            body_lines = []
        elif header is not None:
            # Body keeps its indentation (nested lists, code blocks)
            body_lines.append(line)

    if header is not None:
        notes.append(NoteFields(header, tuple(body_lines)))

    return notes


def read_md_file(path: str | Path) -> list[NoteFields]:
    """Read a markdown file and return its notes."""
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise ValueError(f"File is not valid UTF-8: {path}") from e

    notes = parse_md(content)
    print(f"[parser] {path.name}: {len(notes)} note(s)")
    return notes


def _resolve_files(path_or_glob: str, recursive: bool) -> list[Path]:
    expanded = os.path.expanduser(path_or_glob)

    if os.path.isdir(expanded):
        return discover_md_files(Path(expanded), recursive)

    return [Path(p) for p in sorted(glob.glob(expanded, recursive=True)) if os.path.isfile(p)]


def read_multiple_md(path_or_glob: str | Path, recursive: bool = False) -> list[NoteFields]:
    """
    Read every markdown file matched by a path, folder or glob pattern.

    Notes are returned in file order. A note that appears more than once
    (same header and body, e.g. in a copied file) is kept only once.
    """
    files = _resolve_files(str(path_or_glob), recursive)

    if not files:
        print(f"[parser] WARNING: No markdown files matched: {path_or_glob}")
        return []

    print(f"[parser] Found {len(files)} file(s)")

    all_notes: dict[NoteFields, None] = {}
    for md_file in files:
        for note in read_md_file(md_file):
            all_notes.setdefault(note, None)

    return list(all_notes)
