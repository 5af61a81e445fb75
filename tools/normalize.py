"""
tools/normalize.py — Canonical whitespace for extracted article text.

The selector tiers hand back paragraphs joined by a paragraph-break marker
("\\n\\n"). Inside a paragraph the text still carries whatever the page's
markup left behind: runs of spaces, stray newlines from source formatting,
non-breaking spaces, zero-width characters.

normalize_text() (in order):
  1. Remove zero-width and soft-hyphen Unicode noise
  2. Split into paragraphs on blank lines (newline, optional whitespace, newline)
  3. Collapse every whitespace run inside a paragraph to one space
  4. Drop empty paragraphs
  5. Join with exactly one "\\n\\n"

The output is a fixed point: normalize_text(normalize_text(x)) == normalize_text(x).
A single newline never survives; only deliberate paragraph breaks do.

USAGE:
  from tools.normalize import normalize_text, PARAGRAPH_BREAK

  text = normalize_text("First  para\\nstill first.\\n\\n\\n\\nSecond para.")
  # "First para still first.\\n\\nSecond para."
"""

import re

PARAGRAPH_BREAK = "\n\n"

# \u00ad = soft hyphen, \u200b = zero-width space, \u200c/\u200d = zero-width joiners
_INVISIBLE = re.compile(r"[\u00ad\u200b\u200c\u200d\ufeff]")
_PARAGRAPH_SPLIT = re.compile(r"\n[^\S\n]*\n")
_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _INVISIBLE.sub("", text)

    paragraphs = (collapse_whitespace(chunk) for chunk in _PARAGRAPH_SPLIT.split(text))
    return PARAGRAPH_BREAK.join(p for p in paragraphs if p)


def collapse_whitespace(text: str) -> str:
    """One paragraph: every whitespace run becomes one space, ends trimmed."""
    return _WHITESPACE_RUN.sub(" ", text).strip()
