"""Deck studio service.

Exposes the deck generation and editing workflow over HTTP:
- Session lifecycle and background generation cycles
- Slide and style edits
- Free-form canvas gestures
- JSON export of the whole deck or a subset of slides
"""

__version__ = "1.0.0"
