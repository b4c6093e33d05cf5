"""
Anki package generation.

Classifies parsed notes into Anki card types and writes them to an .apkg
file with genanki.

Card types:
- Type-in: the header starts with one of the deck's type_in_prefixes.
  The answer is the raw body text, so the typed comparison sees plain text.
- Cloze:   the rendered note contains {{...}} markers, which are numbered
  {{c1::...}}, {{c2::...}} in order.
- Basic:   everything else; rendered header on the front, body on the back.
"""

from __future__ import annotations

import os
import re
import time
from enum import Enum
from pathlib import Path

import genanki
import mistune

from .config import DeckConfig
from .parser import NoteFields


class CardKind(Enum):
    TYPE_IN = "Type-in"
    CLOZE = "Cloze"
    BASIC = "Basic"


MODELS = {
    CardKind.TYPE_IN: genanki.BASIC_TYPE_IN_THE_ANSWER_MODEL,
    CardKind.CLOZE: genanki.CLOZE_MODEL,
    CardKind.BASIC: genanki.BASIC_MODEL,
}

CLOZE_PATTERN = re.compile(r'\{\{(.+?)}}')
INVALID_FILENAME_CHARS = re.compile(r'[/\\?<>:*|"\x00-\x1f\x7f]')


def _to_html(text: str) -> str:
    return mistune.html(text)


def process_clozes(text: str) -> str | None:
    """
    Convert {{unnumbered}} {{clozes}} to {{c1::unnumbered}} {{c2::clozes}}.

    Returns None when the text contains no cloze.
    """
    counter = 0

    def _number(match: re.Match) -> str:
        nonlocal counter
        counter += 1
        return f"{{{{c{counter}::{match.group(1)}}}}}"

    numbered = CLOZE_PATTERN.sub(_number, text)
    return numbered if counter else None


def is_type_in(note: NoteFields, deck_config: DeckConfig) -> bool:
    return any(note.header.startswith(p) for p in deck_config.type_in_prefixes)


def card_fields(note: NoteFields, deck_config: DeckConfig) -> tuple[CardKind, list[str]]:
    """Decide the card kind of *note* and build the fields for its model."""
    header_html = _to_html(f"## {note.header}")

    if is_type_in(note, deck_config):
        return CardKind.TYPE_IN, [header_html, note.body_text]

    body_html = _to_html(note.body_text)
    clozes = process_clozes(f"{header_html}\n{body_html}")

    if clozes is not None:
        # Second field is the cloze model's "Back Extra"
        return CardKind.CLOZE, [clozes, ""]

    return CardKind.BASIC, [header_html, body_html]


def classify(note: NoteFields, deck_config: DeckConfig) -> CardKind:
    kind, _ = card_fields(note, deck_config)
    return kind


def to_note(note: NoteFields, deck_config: DeckConfig) -> genanki.Note:
    """Build the genanki note for one parsed markdown section."""
    kind, fields = card_fields(note, deck_config)
    return genanki.Note(model=MODELS[kind], fields=fields)


def sanitize_filename(name: str) -> str:
    """Strip characters that are not allowed in file names."""
    cleaned = INVALID_FILENAME_CHARS.sub("", name).rstrip(". ")
    return cleaned or "deck"


def make_deck_name(deck_name: str) -> str:
    """Output file name: <unix millis>_<deck name>.apkg"""
    timestamp = int(time.time() * 1000)
    return f"{timestamp}_{sanitize_filename(deck_name)}.apkg"


def resolve_output_path(deck_name: str, output: str | Path | None = None) -> Path:
    """
    Where the package is written.

    - No output: a generated name in the current directory
    - An existing directory, or a path ending in a separator: a generated
      name inside it (the directory is created on export)
    - Anything else: used as the file path
    """
    if output is None:
        return Path.cwd() / make_deck_name(deck_name)

    names_dir = isinstance(output, str) and output.endswith(("/", os.sep))
    output = Path(output).expanduser()
    if names_dir or output.is_dir():
        return output / make_deck_name(deck_name)
    return output


def build_deck(notes: list[NoteFields], deck_config: DeckConfig) -> genanki.Deck:
    deck = deck_config.as_deck()
    for note in notes:
        deck.add_note(to_note(note, deck_config))
    return deck


def count_kinds(notes: list[NoteFields], deck_config: DeckConfig) -> dict[CardKind, int]:
    counts = {kind: 0 for kind in CardKind}
    for note in notes:
        counts[classify(note, deck_config)] += 1
    return counts


def export(
    notes: list[NoteFields],
    deck_config: DeckConfig,
    output: str | Path | None = None,
    dry_run: bool = False,
) -> Path | None:
    """
    Write *notes* to an Anki package for *deck_config*.

    Returns the path of the written package, or None on dry-run or when
    there is nothing to export.
    """
    if not notes:
        print("[export] No notes found — nothing to export")
        return None

    counts = count_kinds(notes, deck_config)
    summary = ", ".join(f"{n} {kind.value}" for kind, n in counts.items())
    print(f"[export] Deck '{deck_config.name}': {len(notes)} note(s) ({summary})")

    if dry_run:
        print("[export]   [DRY RUN] No package will be written")
        for i, note in enumerate(notes, 1):
            kind = classify(note, deck_config)
            print(f"[export]   Note {i} [{kind.value}]: {note.header[:60]}")
        return None

    output_path = resolve_output_path(deck_config.name, output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    deck = build_deck(notes, deck_config)
    genanki.Package(deck).write_to_file(str(output_path))

    print(f"[export] Created: {output_path}")
    return output_path
