"""
tools/tiers.py — Locate the article body in a cleaned document tree.

THE CORE CONCEPT: A cascade of increasingly permissive heuristics
  No single rule finds the article on every news site. Three tiers, tried in
  order by the orchestrator, each one only if the previous tier produced
  less than min_content_chars of normalized text:

  Tier 1 — ContainerTier ("container")
    Look inside likely article containers: <article>, .post, .content,
    .story-body, [itemprop="articleBody"], ... and keep each <p> whose text
    is longer than min_paragraph_chars. Highest precision.

    Containers nest ("article .content"). Only outermost matches are read,
    so a paragraph is never counted twice.

  Tier 2 — ParagraphTier ("paragraphs")
    Every <p> in the document, same length rule. Catches sites whose
    markup uses none of the container names.

  Tier 3 — BodyTier ("body")
    The whole visible text of <body>, unfiltered. Lowest quality: whatever
    navigation or boilerplate escaped the cleaner's deny-list ends up here.
    It is the last resort and knowingly accepts that.

WHY PARAGRAPH-LEVEL IN TIER 1:
  Reading a container's full text pulls in headings, captions, bylines and
  "Read more" links. Reading its <p> children with a 30-char minimum keeps
  the prose and drops most of that.

Each tier is a small object with a name and select(tree). The orchestrator
owns the sufficiency check between tiers; a tier never looks at another.

USAGE:
  from tools.tiers import default_tiers

  for tier in default_tiers(settings):
      candidate = tier.select(tree)
      print(tier.name, len(candidate.paragraphs))
"""

from dataclasses import dataclass
from typing import Protocol

from bs4 import BeautifulSoup, Tag

from config import Settings
from tools.normalize import PARAGRAPH_BREAK, collapse_whitespace

ARTICLE_CONTAINER_SELECTORS = (
    "article",
    ".article",
    ".post",
    ".content",
    ".main",
    ".story",
    ".entry-content",
    ".post-content",
    '[itemprop="articleBody"]',
    ".article-body",
    ".article-content",
    ".story-body",
    "#article-body",
    ".story-content",
    ".news-content",
)


# ── Result type ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CandidateText:
    """
    Paragraphs one tier found, in document order.

    Every paragraph already cleared the tier's minimum length.
    """
    tier: str
    paragraphs: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        """Each paragraph followed by a paragraph break, ready for normalize_text()."""
        return "".join(p + PARAGRAPH_BREAK for p in self.paragraphs)

    @property
    def is_empty(self) -> bool:
        return not self.paragraphs


class ContentTier(Protocol):
    name: str

    def select(self, tree: BeautifulSoup) -> CandidateText: ...


# ── Tiers ──────────────────────────────────────────────────────────────────────

class ContainerTier:
    name = "container"

    def __init__(self, min_paragraph_chars: int = 30, selectors=ARTICLE_CONTAINER_SELECTORS) -> None:
        self.min_paragraph_chars = min_paragraph_chars
        self.selectors = tuple(selectors)

    def select(self, tree: BeautifulSoup) -> CandidateText:
        containers = outermost(tree.select(", ".join(self.selectors)))

        paragraphs = []
        for container in containers:
            paragraphs.extend(_long_paragraphs(container, self.min_paragraph_chars))

        return CandidateText(tier=self.name, paragraphs=tuple(paragraphs))


class ParagraphTier:
    name = "paragraphs"

    def __init__(self, min_paragraph_chars: int = 30) -> None:
        self.min_paragraph_chars = min_paragraph_chars

    def select(self, tree: BeautifulSoup) -> CandidateText:
        return CandidateText(
            tier=self.name,
            paragraphs=tuple(_long_paragraphs(tree, self.min_paragraph_chars)),
        )


class BodyTier:
    name = "body"

    def select(self, tree: BeautifulSoup) -> CandidateText:
        root = tree.body or tree
        text = collapse_whitespace(root.get_text(" "))
        return CandidateText(tier=self.name, paragraphs=(text,) if text else ())


def default_tiers(settings: Settings) -> list[ContentTier]:
    return [
        ContainerTier(min_paragraph_chars=settings.min_paragraph_chars),
        ParagraphTier(min_paragraph_chars=settings.min_paragraph_chars),
        BodyTier(),
    ]


# ── Helpers ────────────────────────────────────────────────────────────────────

def element_text(el: Tag) -> str:
    """Descendant text of el with whitespace runs collapsed and ends trimmed."""
    return collapse_whitespace(el.get_text())


def outermost(elements: list[Tag]) -> list[Tag]:
    """
    Drop every element that sits inside another element of the list.

    Input is in document order (soupsieve guarantees this for select()),
    so an ancestor is always seen before its descendants.
    """
    kept: list[Tag] = []
    seen: set[int] = set()
    for el in elements:
        if any(id(parent) in seen for parent in el.parents):
            continue
        kept.append(el)
        seen.add(id(el))
    return kept


def _long_paragraphs(root: Tag, min_chars: int) -> list[str]:
    texts = (element_text(p) for p in root.find_all("p"))
    return [t for t in texts if len(t) > min_chars]
