"""Inclusion/exclusion sets."""

from collections.abc import Sequence

from pydantic import field_validator

from backend.tripdesk.models.common import FrozenWireModel


class InclusionSet(FrozenWireModel):
    """Chosen catalog entries plus custom ones, with an optional note.

    ``selected`` keeps insertion order and never holds duplicates.
    """

    selected: tuple[str, ...] = ()
    custom_note: str | None = None

    @field_validator("selected")
    @classmethod
    def dedupe_selected(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Drop blanks and duplicates while preserving order."""
        seen: dict[str, None] = {}
        for item in v:
            cleaned = item.strip()
            if cleaned:
                seen.setdefault(cleaned, None)
        return tuple(seen)

    @classmethod
    def from_catalog(cls, catalog: Sequence[str], preselect: int) -> "InclusionSet":
        """Start with the first ``preselect`` catalog entries chosen."""
        return cls(selected=tuple(catalog[:preselect]))

    def toggle(self, item: str) -> "InclusionSet":
        """Select an unselected entry or deselect a selected one."""
        if item in self.selected:
            return self.remove(item)
        return self.model_copy(update={"selected": (*self.selected, item)})

    def add_custom(self, item: str) -> "InclusionSet":
        """Append a free-text entry; blanks and duplicates are ignored."""
        cleaned = item.strip()
        if not cleaned or cleaned in self.selected:
            return self
        return self.model_copy(update={"selected": (*self.selected, cleaned)})

    def remove(self, item: str) -> "InclusionSet":
        """Deselect an entry."""
        return self.model_copy(
            update={"selected": tuple(s for s in self.selected if s != item)}
        )

    def with_note(self, note: str | None) -> "InclusionSet":
        """Replace the free-text note."""
        return self.model_copy(update={"custom_note": note or None})

    def custom_entries(self, catalog: Sequence[str]) -> list[str]:
        """Selected entries that are not in the catalog."""
        known = set(catalog)
        return [item for item in self.selected if item not in known]
