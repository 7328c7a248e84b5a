"""Editor for ordered, repeatable sub-records of a draft.

The editor works on a list owned by the draft. Numbered collections (days,
hotel nights) keep ``item[i].<ordinal> == i + 1`` after every structural
operation; any ordinal written by hand is overwritten by the next one.
"""

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=BaseModel)


class CollectionEditor(Generic[ItemT]):
    """Append/remove/update operations over one collection."""

    def __init__(
        self,
        items: list[ItemT],
        factory: Callable[[], ItemT],
        *,
        ordinal_field: str | None = None,
        minimum: int = 0,
    ) -> None:
        """Bind the editor to a list.

        Args:
            items: List owned by the draft (mutated in place)
            factory: Builds the default item for ``append``
            ordinal_field: Attribute holding the 1-based position, if any
            minimum: Size below which ``remove_at`` is a no-op
        """
        self._items = items
        self._factory = factory
        self._ordinal_field = ordinal_field
        self._minimum = minimum

    @property
    def items(self) -> list[ItemT]:
        return self._items

    @property
    def numbered(self) -> bool:
        return self._ordinal_field is not None

    def __len__(self) -> int:
        return len(self._items)

    def append(self, item: ItemT | None = None) -> ItemT:
        """Append an item (the default one if omitted).

        Returns:
            The stored item, carrying its ordinal for numbered collections
        """
        new_item = item if item is not None else self._factory()
        self._items.append(new_item)
        self.renumber()
        return self._items[-1]

    def remove_at(self, index: int) -> bool:
        """Remove the item at ``index``.

        Returns:
            False if the collection is at its minimum size (nothing removed)

        Raises:
            IndexError: If ``index`` is out of range
        """
        if not -len(self._items) <= index < len(self._items):
            raise IndexError(f"no item at index {index}")

        if len(self._items) <= self._minimum:
            logger.debug(
                "Refusing to remove item below minimum",
                extra={"structured": {"index": index, "minimum": self._minimum}},
            )
            return False

        del self._items[index]
        self.renumber()
        return True

    def update_at(self, index: int, **patch: Any) -> ItemT:
        """Replace fields of one item.

        The ordinal is never taken from ``patch``, under either its attribute
        or its wire name; the item keeps its position.

        Raises:
            IndexError: If ``index`` is out of range
            pydantic.ValidationError: If the patched item is invalid
        """
        current = self._items[index]
        merged = {**current.model_dump(), **patch}
        updated = type(current).model_validate(merged)
        if self._ordinal_field is not None:
            updated = updated.model_copy(
                update={self._ordinal_field: getattr(current, self._ordinal_field)}
            )
        self._items[index] = updated
        return updated

    def renumber(self) -> None:
        """Re-derive ordinals from list order."""
        if self._ordinal_field is None:
            return

        for position, item in enumerate(self._items, start=1):
            if getattr(item, self._ordinal_field) != position:
                self._items[position - 1] = item.model_copy(
                    update={self._ordinal_field: position}
                )
