"""Which annotation of a sentence view is expanded, if any."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Collapsed:
    pass


@dataclass(frozen=True)
class Expanded:
    identity: int


Selection = Union[Collapsed, Expanded]

COLLAPSED = Collapsed()


def toggle(selection: Selection, identity: int) -> Selection:
    """Clicking the open annotation closes it; any other one opens directly."""
    if isinstance(selection, Expanded) and selection.identity == identity:
        return COLLAPSED
    return Expanded(identity)


def expanded_identity(selection: Selection):
    return selection.identity if isinstance(selection, Expanded) else None
