"""Word-level diff between the submitted text and its correction."""

import re
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import List


TOKEN_RE = re.compile(r"\w+|\s+|[^\w\s]")


@dataclass(frozen=True)
class DiffPart:
    value: str
    added: bool = False
    removed: bool = False

    @property
    def kind(self) -> str:
        if self.added:
            return "added"
        if self.removed:
            return "removed"
        return "same"


def tokenize(text: str) -> List[str]:
    """Words, whitespace runs and single punctuation marks, in order."""
    return TOKEN_RE.findall(text)


def _push(parts: List[DiffPart], value: str, added: bool = False, removed: bool = False):
    if not value:
        return
    if parts and parts[-1].added == added and parts[-1].removed == removed:
        parts[-1] = DiffPart(parts[-1].value + value, added, removed)
    else:
        parts.append(DiffPart(value, added, removed))


def diff_words(original: str, corrected: str) -> List[DiffPart]:
    """Parts whose unchanged+removed values rebuild `original` and
    unchanged+added values rebuild `corrected`."""
    a = tokenize(original)
    b = tokenize(corrected)
    parts: List[DiffPart] = []

    matcher = SequenceMatcher(None, a, b, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            _push(parts, "".join(a[i1:i2]))
        else:
            _push(parts, "".join(a[i1:i2]), removed=True)
            _push(parts, "".join(b[j1:j2]), added=True)

    return parts


def original_text(parts: List[DiffPart]) -> str:
    return "".join(p.value for p in parts if not p.added)


def corrected_text(parts: List[DiffPart]) -> str:
    return "".join(p.value for p in parts if not p.removed)
