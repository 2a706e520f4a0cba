"""Household spending taxonomy: ordered categories and their chart colours."""

from __future__ import annotations

from typing import Iterable, Iterator

DEFAULT_PALETTE = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#96CEB4",
    "#FFEAA7",
    "#DDA0DD",
    "#98D8C8",
    "#F7DC6F",
    "#BB8FCE",
    "#85C1E9",
    "#F8B500",
    "#E74C3C",
    "#58D68D",
    "#95A5A6",
)

UNKNOWN_CATEGORY_COLOR = "#95A5A6"

DEFAULT_CATEGORY_COLORS = {
    "01 Food": "#FF6B6B",
    "02 Household": "#4ECDC4",
    "03 Transport": "#45B7D1",
    "04 Utilities": "#96CEB4",
    "05 Communication": "#FFEAA7",
    "06 Medical": "#DDA0DD",
    "07 Entertainment": "#98D8C8",
    "08 Clothing": "#F7DC6F",
    "09 Education": "#BB8FCE",
    "10 Housing": "#85C1E9",
    "11 Insurance": "#F8B500",
    "12 Taxes": "#E74C3C",
    "13 Social": "#58D68D",
    "14 Other": "#95A5A6",
}


class CategoryTaxonomy:
    """Fixed, ordered set of recognised categories.

    Ordering drives zero-fill, row order and tie-breaks in every categorical
    aggregate, so it is frozen at construction.
    """

    def __init__(self, categories: Iterable[str], colors: dict[str, str] | None = None) -> None:
        labels = tuple(str(label).strip() for label in categories)
        if any(not label for label in labels):
            raise ValueError("Category labels must be non-empty.")
        if len(set(labels)) != len(labels):
            raise ValueError("Category labels must be unique.")
        colors = colors or {}
        self._categories = labels
        self._positions = {label: idx for idx, label in enumerate(labels)}
        self._colors = {
            label: str(colors.get(label) or DEFAULT_PALETTE[idx % len(DEFAULT_PALETTE)])
            for idx, label in enumerate(labels)
        }

    @property
    def categories(self) -> tuple[str, ...]:
        return self._categories

    def __iter__(self) -> Iterator[str]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, category: object) -> bool:
        return category in self._positions

    def __repr__(self) -> str:
        return f"CategoryTaxonomy({list(self._categories)!r})"

    def color(self, category: str) -> str:
        return self._colors.get(category, UNKNOWN_CATEGORY_COLOR)

    def position(self, category: str) -> int:
        """Taxonomy index of ``category``; unknown labels sort after all known ones."""
        return self._positions.get(category, len(self._categories))

    def colors(self) -> dict[str, str]:
        return dict(self._colors)


DEFAULT_TAXONOMY = CategoryTaxonomy(DEFAULT_CATEGORY_COLORS.keys(), DEFAULT_CATEGORY_COLORS)


def load_taxonomy(labels: Iterable[str], colors: dict[str, str] | None = None) -> CategoryTaxonomy:
    """Build a taxonomy from a configured list, colouring gaps from the palette."""
    cleaned = [str(label).strip() for label in labels if label is not None]
    if not cleaned:
        raise ValueError("A taxonomy needs at least one category.")
    return CategoryTaxonomy(cleaned, colors)
