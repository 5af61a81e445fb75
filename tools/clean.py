"""
tools/clean.py — Parse HTML and strip everything that is not article prose.

THE CORE CONCEPT: Boilerplate removal before selection
  A news page is mostly not the article: navigation, cookie banners, share
  bars, ad slots, comment threads, embedded media. If those survive into the
  selector tiers, the paragraph tier and especially the whole-body tier
  pick them up as "content".

  clean_markup() parses the page and deletes two kinds of element:
    - by tag:   script, style, nav, header, footer, aside, iframe, form,
                button, img, image, picture, video, audio, noscript, svg
    - by class or id matching a deny-list term (ad, banner, sidebar, ...)

SEGMENT MATCHING:
  Class and id values are split on "-", "_" and camelCase boundaries and
  compared segment by segment, so "ad" matches "ad", "ad-slot", "top_ad",
  "adContainer" but not "header", "read-more" or "download". Multi-word
  terms ("cookie-banner") must appear as consecutive segments
  ("site-cookie-banner" and "cookieBanner" match).

ONE PASS:
  Every match is collected against the untouched tree before anything is
  removed, so the result does not depend on removal order. Elements inside
  a subtree that is already gone are skipped.

PARSING:
  html.parser is lenient: unclosed tags, stray end tags and fragments all
  parse to *some* tree. Nothing here raises on bad markup.

USAGE:
  from tools.clean import clean_markup

  tree = clean_markup(html)
  tree.select("article p")
"""

import re

from bs4 import BeautifulSoup, Tag

DENIED_TAGS = (
    "script", "style", "nav", "header", "footer", "aside", "iframe",
    "form", "button", "img", "image", "picture", "video", "audio",
    "noscript", "svg",
)

DENIED_NAME_TERMS = (
    "ad", "ads", "advertisement", "banner", "promo", "promotion",
    "sidebar", "comments", "share", "social",
    "cookie-notice", "cookie-banner", "popup", "modal",
)

# Document roots are never removed by class or id ("modal-open" on <body>).
PROTECTED_TAGS = ("html", "body")

_SEGMENT_SPLIT = re.compile(r"[-_\s]+")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def clean_markup(html: str) -> BeautifulSoup:
    """Parse html and remove every denied element. Returns the working tree."""
    tree = parse(html)
    remove_denied(tree)
    return tree


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def remove_denied(tree: BeautifulSoup) -> int:
    """
    Remove all denied elements from tree in place.

    Returns the number of matched elements (including ones already gone
    with an ancestor).
    """
    matches = [el for el in tree.find_all(True) if is_denied(el)]

    for el in matches:
        if not el.decomposed:
            el.decompose()

    return len(matches)


def is_denied(el: Tag) -> bool:
    if el.name in DENIED_TAGS:
        return True
    if el.name in PROTECTED_TAGS:
        return False

    names = list(el.get("class") or [])
    el_id = el.get("id")
    if el_id:
        names.append(el_id)

    return any(_matches_term(name) for name in names)


# ── Private helpers ────────────────────────────────────────────────────────────

def _matches_term(name: str) -> bool:
    name = _CAMEL_BOUNDARY.sub(r"\1-\2", str(name))
    segments = [s for s in _SEGMENT_SPLIT.split(name.lower()) if s]
    if not segments:
        return False

    joined = "-" + "-".join(segments) + "-"
    return any(f"-{term}-" in joined for term in DENIED_NAME_TERMS)
