"""
Text-slot access over lxml HTML trees.

lxml stores character data on elements rather than in separate text nodes:
`element.text` holds the text before the first child, `element.tail` the text
after the element's closing tag. A TextSlot names one of those two places, so
the orchestrator can treat every run of text like a small string buffer.
"""

import html
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Final, Literal

from lxml import etree
from lxml import html as lxml_html

from .types import MARKER

__all__ = [
    "CHIP_CLASS",
    "ChipPiece",
    "TextSlot",
    "clear_chips",
    "create_chip",
    "insert_chips",
    "is_chip",
    "is_within",
    "iter_text_slots",
    "parse_fragment",
    "serialize_fragment",
    "tree_contains_marker",
]

logger = logging.getLogger(__name__)

CHIP_CLASS: Final[str] = "ct-inline-tp"
CHIP_PATTERN_ATTR: Final[str] = "data-ct-pattern"
CHIP_ARROW: Final[str] = "→"
CHIP_CLOSE: Final[str] = "×"
MAX_CHIPS: Final[int] = 50


@dataclass(frozen=True)
class TextSlot:
    """
    A handle on `element.text` or `element.tail`.

    Two slots are equal when they point at the same element and attribute, so
    a slot can be used as a stable scope key across passes.
    """

    element: etree._Element
    attr: Literal["text", "tail"] = "text"

    @property
    def owner(self) -> etree._Element | None:
        """Return the element whose content this text belongs to."""
        return self.element if self.attr == "text" else self.element.getparent()

    @property
    def name(self) -> str:
        """Return a short label such as '<p>.text' for logs and reports."""
        return f"<{self.element.tag}>.{self.attr}"

    def get(self) -> str:
        """Return the slot's current text, or '' when it is unset."""
        return getattr(self.element, self.attr) or ""

    def set(self, value: str) -> None:
        """Replace the slot's text. An empty string clears it."""
        setattr(self.element, self.attr, value or None)


@dataclass(frozen=True)
class ChipPiece:
    """One pattern occurrence to turn into a chip: its span, raw text and label."""

    start: int
    end: int
    raw: str
    label: str


def is_chip(element: etree._Element) -> bool:
    """Return True if the element is a translation chip."""
    if not isinstance(element.tag, str):
        return False
    return CHIP_CLASS in (element.get("class") or "").split()


def is_within(element: etree._Element | None, container: etree._Element | None) -> bool:
    """Return True if `element` is `container` or one of its descendants."""
    if element is None or container is None:
        return False
    if element is container:
        return True
    return any(ancestor is container for ancestor in element.iterancestors())


def iter_text_slots(root: etree._Element) -> Iterator[TextSlot]:
    """
    Yield every non-empty text slot under `root` in document order.

    Chips are never descended into, although their tails are yielded. Comments
    and processing instructions contribute only their tails. The tail of
    `root` itself lies outside the tree and is not yielded.
    """
    stack: list[tuple[str, etree._Element]] = [("text", root)]
    while stack:
        attr, element = stack.pop()
        if attr == "tail":
            if element.tail:
                yield TextSlot(element, "tail")
            continue

        if element.text:
            yield TextSlot(element, "text")
        for child in reversed(element):
            stack.append(("tail", child))
            if isinstance(child.tag, str) and not is_chip(child):
                stack.append(("text", child))


def tree_contains_marker(root: etree._Element) -> bool:
    """Fast check for a `ct_translate(` marker anywhere in the tree's text."""
    return MARKER in "".join(root.itertext())


def create_chip(raw: str, label: str) -> lxml_html.HtmlElement:
    """
    Build a non-editable chip element showing the resolved label.

    The raw pattern is kept in `data-ct-pattern` so `clear_chips` can restore it.
    """
    chip = lxml_html.Element("span")
    chip.set("class", CHIP_CLASS)
    chip.set("contenteditable", "false")
    chip.set(CHIP_PATTERN_ATTR, raw)

    for suffix, text in (("arrow", CHIP_ARROW), ("label", label), ("close", CHIP_CLOSE)):
        part = etree.SubElement(chip, "span")
        part.set("class", f"{CHIP_CLASS}__{suffix}")
        part.text = text
    return chip


def insert_chips(slot: TextSlot, pieces: Sequence[ChipPiece]) -> list[lxml_html.HtmlElement]:
    """
    Split a slot's text around the given spans and insert one chip per span.

    Text before, between and after the spans is preserved.

    Returns:
        The inserted chips, in document order.

    """
    if not pieces:
        return []
    parent = slot.owner
    if parent is None:
        logger.debug("Cannot insert chips into %s: the slot has no parent.", slot.name)
        return []

    text = slot.get()
    ordered = sorted(pieces, key=lambda piece: piece.start)
    index = 0 if slot.attr == "text" else parent.index(slot.element) + 1
    slot.set(text[: ordered[0].start])

    chips = []
    for offset, piece in enumerate(ordered):
        chip = create_chip(piece.raw, piece.label)
        following = ordered[offset + 1].start if offset + 1 < len(ordered) else len(text)
        chip.tail = text[piece.end : following] or None
        parent.insert(index + offset, chip)
        chips.append(chip)
    return chips


def _remove_keeping_tail(element: etree._Element, text: str) -> None:
    """Remove `element` and merge `text` into the text that preceded it."""
    parent = element.getparent()
    previous = element.getprevious()
    if previous is not None:
        previous.tail = (previous.tail or "") + text or None
    else:
        parent.text = (parent.text or "") + text or None
    element.tail = None
    parent.remove(element)


def clear_chips(root: etree._Element, *, limit: int = MAX_CHIPS * 2) -> int:
    """
    Remove chips under `root`, putting their raw pattern text back in place.

    Restored text is merged into the neighbouring text, so the tree reads
    exactly as it did before the chips were inserted. Works on any lxml
    element, whether it came from the HTML or the XML parser.

    Returns:
        The number of chips removed.

    """
    chips = [element for element in root.iterdescendants() if is_chip(element)]
    removed = 0
    for chip in chips[:limit]:
        if chip.getparent() is None:
            continue
        _remove_keeping_tail(chip, (chip.get(CHIP_PATTERN_ATTR) or "") + (chip.tail or ""))
        removed += 1
    if len(chips) > limit:
        logger.info("Chip clearing stopped at %d of %d chips.", limit, len(chips))
    return removed


def parse_fragment(markup: str) -> lxml_html.HtmlElement:
    """Parse an HTML fragment into a tree wrapped in a single `<div>` root."""
    if not markup.strip():
        root = lxml_html.Element("div")
        root.text = markup or None
        return root
    return lxml_html.fragment_fromstring(markup, create_parent="div")


def serialize_fragment(root: lxml_html.HtmlElement) -> str:
    """Serialize the contents of a wrapper root created by `parse_fragment`."""
    inner = html.escape(root.text or "", quote=False)
    return inner + "".join(lxml_html.tostring(child, encoding="unicode") for child in root)
