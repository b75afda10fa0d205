"""Class label loading and alphabet filtering.

The model predicts over a large vocabulary (kanji, kana, latin, ...). The
recognizer only reports glyphs from one target alphabet, so at startup the
label list is reduced to a FilteredIndex: an immutable class-index ->
glyph mapping of the labels whose leading character falls in the target
Unicode block.

Only the first character of each label is examined. Multi-character labels
collapse to their leading glyph; this matches how the label files are
produced and is intentional.

Example usage::

    from ink_lib.recognition.labels import (
        UnicodeBlockFilter, build_filtered_index, load_labels)

    labels = load_labels('etlcb_9b_labels.txt')
    index = build_filtered_index(labels, UnicodeBlockFilter(0x3040, 0x309F))
    index[12]   # 'あ'
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Protocol, Sequence, Tuple

from ..config import ALPHABET_RANGE
from ..errors import InitializationError

logger = logging.getLogger(__name__)

LabelTable = Tuple[str, ...]
FilteredIndex = Mapping[int, str]


class LabelFilterPolicy(Protocol):
    """Decides which class labels belong to the target alphabet.

    ``select`` returns the glyph to report for the label, or None to drop
    the class.
    """

    def select(self, label: str) -> Optional[str]:
        ...


class UnicodeBlockFilter:
    """Keep labels whose leading code point is inside [first, last].

    Attributes:
        first: First code point of the block, inclusive.
        last: Last code point of the block, inclusive.
    """

    def __init__(self, first: int = ALPHABET_RANGE[0], last: int = ALPHABET_RANGE[1]):
        if first > last:
            raise ValueError(f"Empty code point range: {first:#x}-{last:#x}")
        self.first = first
        self.last = last

    @classmethod
    def from_range(cls, code_range: Sequence[int]) -> UnicodeBlockFilter:
        return cls(code_range[0], code_range[1])

    def contains(self, char: str) -> bool:
        return bool(char) and self.first <= ord(char[0]) <= self.last

    def select(self, label: str) -> Optional[str]:
        if not label:
            return None
        glyph = label[0]
        return glyph if self.contains(glyph) else None

    def __repr__(self) -> str:
        return f"UnicodeBlockFilter({self.first:#06x}, {self.last:#06x})"


def parse_labels(text: str) -> LabelTable:
    """Split newline-delimited label text into a table.

    Line index is class index. Trailing blank lines are ignored; blank
    lines in the middle keep their position so later indices stay aligned.
    Carriage returns from CRLF files are stripped.
    """
    lines = [line.rstrip('\r') for line in text.split('\n')]
    while lines and not lines[-1].strip():
        lines.pop()
    return tuple(lines)


def load_labels(path: str | Path) -> LabelTable:
    """Read a UTF-8 label file.

    Raises:
        InitializationError: If the file is missing, unreadable or empty.
    """
    try:
        text = Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as exc:
        raise InitializationError(f"Failed to load labels from {path}: {exc}") from exc
    labels = parse_labels(text)
    if not labels:
        raise InitializationError(f"Label file {path} is empty")
    logger.info("Loaded %d labels from %s", len(labels), path)
    return labels


def build_filtered_index(labels: Sequence[str],
                         policy: Optional[LabelFilterPolicy] = None) -> FilteredIndex:
    """Reduce the label table to the target alphabet.

    Args:
        labels: One label per class, index = position.
        policy: Filter strategy; defaults to the configured Unicode block.

    Returns:
        Read-only mapping of class index -> glyph, in class-index order.

    Raises:
        InitializationError: If labels is empty or nothing matches.
    """
    if not labels:
        raise InitializationError("Label list is empty")
    if policy is None:
        policy = UnicodeBlockFilter()

    index = {}
    for i, label in enumerate(labels):
        glyph = policy.select(label)
        if glyph is not None:
            index[i] = glyph

    if not index:
        raise InitializationError(
            f"No labels match {policy!r} among {len(labels)} classes")
    logger.info("Filtered %d of %d labels with %r", len(index), len(labels), policy)
    return MappingProxyType(index)
