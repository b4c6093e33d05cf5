"""
mkanki
======
Turns markdown notes into an Anki deck package (.apkg).

Every "## Header" section in a markdown file becomes one note. Notes are
classified as type-in-the-answer, cloze or basic cards, based on the deck
config and the {{cloze}} markers they contain, and written out with genanki.
"""

__version__ = "0.1.0"
