"""
Configuration management.

Loads the TOML deck config (by default ~/.config/mkanki.toml) and
resolves which deck a run writes to.

Example config::

    [all]
    type_in_prefixes = ["Spell:"]

    [[decks]]
    id = 1718203948
    name = "Spanish"
    description = "Vocabulary"
    is_default = true
    type_in_prefixes = ["Translate:"]
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import genanki
from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr, ValidationError

DEFAULT_CONFIG_FILE = Path("~/.config/mkanki.toml")


class ConfigError(Exception):
    """The config file is malformed or describes an invalid set of decks."""


class DeckConfig(BaseModel):
    """One [[decks]] entry."""

    id: StrictInt = Field(..., description="Anki deck id, stable across exports")
    name: StrictStr = Field(..., min_length=1, description="Deck name shown in Anki")
    description: StrictStr | None = Field(default=None, description="Optional deck description")
    is_default: StrictBool = Field(default=False, description="Deck used when --deck is not given")
    type_in_prefixes: list[StrictStr] = Field(
        default_factory=list,
        description="Header prefixes that make type-in-the-answer cards",
    )

    def as_deck(self) -> genanki.Deck:
        return genanki.Deck(self.id, self.name, self.description or "")


class ConfigAll(BaseModel):
    """The [all] table: settings shared by every deck."""

    type_in_prefixes: list[StrictStr] = Field(default_factory=list)


class Config(BaseModel):
    """Top-level config file."""

    all: ConfigAll = Field(default_factory=ConfigAll)
    decks: list[DeckConfig]


def resolve_config_path(cli_override: str | None = None) -> Path:
    """
    Get the config file path.

    Priority:
    1. CLI argument (--config)
    2. ~/.config/mkanki.toml
    """
    if cli_override:
        path = Path(cli_override).expanduser()
        print(f"[config] Config file set via CLI: {path}")
        return path

    path = DEFAULT_CONFIG_FILE.expanduser()
    print(f"[config] Using default config file: {path}")
    return path


def _format_loc(loc: tuple) -> str:
    """('decks', 1, 'name') -> 'decks[1].name'"""
    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out


def _format_validation_error(ve: ValidationError) -> str:
    return "; ".join(f"{_format_loc(err['loc'])}: {err['msg']}" for err in ve.errors())


def parse_config(data: dict) -> list[DeckConfig]:
    """
    Build deck configs from already-decoded TOML data.

    Prefixes listed under [all] are merged into every deck (sorted and
    deduplicated). Exactly one deck must be the default.
    """
    try:
        config = Config.model_validate(data)
    except ValidationError as ve:
        raise ConfigError(f"Invalid config: {_format_validation_error(ve)}") from ve

    decks = config.decks
    global_prefixes = config.all.type_in_prefixes

    if global_prefixes:
        for deck in decks:
            deck.type_in_prefixes = sorted(set(deck.type_in_prefixes) | set(global_prefixes))

    if sum(1 for d in decks if d.is_default) != 1:
        raise ConfigError("Exactly one deck must have the 'is_default' field set to true")

    return decks


def read_config(config_path: str | Path) -> list[DeckConfig]:
    """Read and validate the TOML config file."""
    config_path = Path(config_path).expanduser()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"Config file is not valid UTF-8: {config_path}") from e

    decks = parse_config(data)
    print(f"[config] Loaded {len(decks)} deck(s) from {config_path.name}")
    return decks


def default_deck(decks: list[DeckConfig]) -> DeckConfig:
    for deck in decks:
        if deck.is_default:
            return deck
    raise ConfigError("No default deck configured")


def select_deck(decks: list[DeckConfig], name: str | None = None) -> DeckConfig:
    """Pick the deck called *name*, or the default deck when no name is given."""
    if not name:
        deck = default_deck(decks)
        print(f"[config] Using default deck: {deck.name}")
        return deck

    for deck in decks:
        if deck.name == name:
            print(f"[config] Using deck: {deck.name}")
            return deck

    known = ", ".join(d.name for d in decks)
    raise ConfigError(f"Unknown deck '{name}' (configured decks: {known})")


# ---------------------------------------------------------------------------
# Shared folder-discovery helpers
# ---------------------------------------------------------------------------

SKIP_FOLDERS = {".git", ".obsidian", ".trash", "node_modules"}


def discover_md_files(folder: Path, recursive: bool) -> list[Path]:
    """Find markdown files in *folder*, skipping non-note directories."""
    if recursive:
        all_md = sorted(folder.rglob("*.md"))
        return [
            f for f in all_md
            if not any(part in SKIP_FOLDERS for part in f.relative_to(folder).parts)
        ]
    return sorted(folder.glob("*.md"))
