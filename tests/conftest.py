"""Shared fixtures for mkanki tests."""

import pytest

from mkanki.config import DeckConfig


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------

SAMPLE_CONFIG = """\
[all]
type_in_prefixes = ["Spell:"]

[[decks]]
id = 1718203948
name = "Spanish"
description = "Vocabulary and grammar"
is_default = true
type_in_prefixes = ["Translate:"]

[[decks]]
id = 1718203949
name = "Chemistry"
"""


@pytest.fixture
def config_file(tmp_path):
    """A valid two-deck config file."""
    cfg = tmp_path / "mkanki.toml"
    cfg.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return cfg


@pytest.fixture
def deck_config():
    return DeckConfig(
        id=1718203948,
        name="Spanish",
        description="Vocabulary",
        is_default=True,
        type_in_prefixes=["Translate:"],
    )


# ---------------------------------------------------------------------------
# Markdown content fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_md():
    return (
        "# Spanish notes\n"
        "Intro text that belongs to no note.\n\n"
        "## What does *perro* mean?\n"
        "Dog\n\n"
        "<!-- reviewed 2024-05-01 -->\n"
        "## Translate: cat\n"
        "gato\n\n"
        "## Capitals\n"
        "The capital of Spain is {{Madrid}} and of Peru is {{Lima}}.\n"
    )


@pytest.fixture
def notes_dir(tmp_path, sample_md):
    """A folder with two markdown files and a nested one."""
    folder = tmp_path / "notes"
    folder.mkdir()
    (folder / "a.md").write_text(sample_md, encoding="utf-8")
    (folder / "b.md").write_text("## Hola\nHello\n", encoding="utf-8")
    sub = folder / "sub"
    sub.mkdir()
    (sub / "c.md").write_text("## Adiós\nGoodbye\n", encoding="utf-8")
    return folder

