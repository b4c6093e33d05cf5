"""
CLI entry point.

Usage:
    python -m mkanki notes.md
    python -m mkanki notes/                       (all .md files in folder)
    python -m mkanki notes/ --recursive           (subfolders too)
    python -m mkanki "notes/**/*.md"              (glob)
    python -m mkanki notes.md --deck Spanish      (non-default deck)
    python -m mkanki notes.md -o spanish.apkg
    python -m mkanki notes.md --config ./mkanki.toml
    python -m mkanki notes.md --dry-run
"""

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import ConfigError, read_config, resolve_config_path, select_deck
from .exporter import export
from .parser import read_multiple_md


def _print_banner(target: str, config_path: Path, output: str | None, dry_run: bool) -> None:
    """Print a startup banner with run configuration."""
    print()
    print("=" * 60)
    print(f"  Markdown → Anki v{__version__}")
    print("=" * 60)
    print(f"  Input:   {target}")
    print(f"  Config:  {config_path}")
    print(f"  Output:  {output or '(generated name in current folder)'}")
    if dry_run:
        print(f"  Dry run: YES (no package will be written)")
    print("=" * 60)
    print()


def run(
    target: str,
    config_path: Path,
    output: str | None = None,
    deck_name: str | None = None,
    recursive: bool = False,
    dry_run: bool = False,
) -> Path | None:
    """Read config and notes, then export the selected deck."""
    _print_banner(target, config_path, output, dry_run)

    try:
        decks = read_config(config_path)
        deck_config = select_deck(decks, deck_name)
        notes = read_multiple_md(target, recursive=recursive)
    except (ConfigError, OSError, ValueError) as e:
        print(f"[error] {e}")
        sys.exit(1)

    if not notes:
        print(f"[error] No notes found in: {target}")
        sys.exit(1)

    try:
        result = export(notes, deck_config, output=output, dry_run=dry_run)
    except OSError as e:
        print(f"[error] Could not write package: {e}")
        sys.exit(1)

    print()
    print("=" * 60)
    print("  Done!")
    print("=" * 60)
    return result


def main():
    parser = argparse.ArgumentParser(
        prog="mkanki",
        description="Build an Anki deck package from '## Header' sections of markdown files",
    )
    parser.add_argument(
        "input",
        help="Markdown file, folder or glob pattern (quote it to stop shell expansion)",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        help="Path to the config file (default: ~/.config/mkanki.toml)",
        default=None,
    )
    parser.add_argument(
        "-o", "--output",
        metavar="FILE",
        help="Path for the generated deck, or a folder to put it in",
        default=None,
    )
    parser.add_argument(
        "-d", "--deck",
        help="Name of the configured deck to use (default: the is_default deck)",
        default=None,
    )
    parser.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="When input is a folder, include .md files in subfolders too",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show how notes would be classified without writing a package",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args()
    config_path = resolve_config_path(args.config)

    run(
        args.input,
        config_path,
        output=args.output,
        deck_name=args.deck,
        recursive=args.recursive,
        dry_run=args.dry_run,
    )


if __name__ == "__main__":
    main()
