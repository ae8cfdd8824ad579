"""Ordered, index-addressable page sequence."""

from bookbinder.core.hierarchy import validate_level, validate_levels
from bookbinder.errors import ValidationError
from bookbinder.models.book import PageEntry


class PageModel:
    """Pages in document order.

    Slots are addressed by index. Placing a page past the end leaves
    empty slots, which are skipped in the final order.
    """

    def __init__(self) -> None:
        self._slots: list[PageEntry | None] = []

    def __len__(self) -> int:
        return sum(1 for entry in self._slots if entry is not None)

    def __iter__(self):
        return iter(self.ordered())

    def previous_level(self, index: int | None = None) -> int:
        """Level of the nearest page before the insertion point."""
        end = len(self._slots) if index is None else min(index, len(self._slots))
        for entry in reversed(self._slots[:end]):
            if entry is not None:
                return entry.level
        return 0

    def add(self, entry: PageEntry, index: int | None = None) -> int:
        """Place a page and return the slot it landed in.

        The resulting sequence is validated before anything changes, so a
        rejected page leaves the model as it was.
        """
        validate_level(entry.level)
        if index is None:
            index = len(self._slots)
        elif isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise ValidationError(
                f"Page index must be a non-negative integer, got {index!r}",
                field="index",
            )

        candidate = list(self._slots)
        if index >= len(candidate):
            candidate.extend([None] * (index - len(candidate) + 1))
        candidate[index] = entry

        validate_levels(page.level for page in candidate if page is not None)

        self._slots = candidate
        return index

    def ordered(self) -> list[PageEntry]:
        """Final page order with empty slots dropped."""
        return [entry for entry in self._slots if entry is not None]

    def snapshot(self) -> tuple[PageEntry, ...]:
        """Frozen final order for a generation run."""
        return tuple(self.ordered())
