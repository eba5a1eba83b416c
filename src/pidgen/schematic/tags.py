"""
Equipment tag allocation.

Tags follow the drawing-number convention PREFIX-N (P-1, P-2, V-1, ...).
Numbering follows input order only: reordering the equipment list renumbers
the tags, so callers that need stable tags across edits must keep the order.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .symbols import EquipmentClass, tag_prefix

if TYPE_CHECKING:
    from ..process_model import Equipment


class TagAllocator:
    """
    Per-call registry of running counters, one per tag prefix.

    Classes sharing a prefix (all pumps use P) share a counter, so two
    equipment items never receive the same tag. Create a fresh allocator for
    every diagram; it is not meant to be shared between generation calls.

    Usage:
        tags = TagAllocator().allocate(equipment)
        tags[0]  # "P-1"
    """

    def __init__(self) -> None:
        self._counters: defaultdict[str, int] = defaultdict(int)

    def next_tag(self, equipment_class: EquipmentClass | str | None) -> str:
        """Allocate the next tag for a class."""
        prefix = tag_prefix(equipment_class)
        self._counters[prefix] += 1
        return f"{prefix}-{self._counters[prefix]}"

    def allocate(self, equipment: Iterable["Equipment"]) -> list[str]:
        """
        Assign a tag to each equipment item in iteration order.

        Tags are positional, so items sharing an id still get their own tag.

        Returns:
            List of tags, one per equipment item, in input order
        """
        return [self.next_tag(item.equipment_class) for item in equipment]

    @property
    def counts(self) -> dict[str, int]:
        """Number of tags issued so far, per prefix."""
        return dict(self._counters)
