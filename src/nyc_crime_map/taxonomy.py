"""Category lists for NYC incidents and public places, plus the ALL sentinel."""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

from .utils.exceptions import UnknownCategoryError

logger = logging.getLogger(__name__)


ALL = "All"

# Declaration order drives the option lists and the chart legend.
INCIDENT_CATEGORIES: Tuple[str, ...] = (
    "Theft",
    "Assault",
    "Burglary",
    "Robbery",
)

VENUE_CATEGORIES: Tuple[str, ...] = (
    "Park",
    "Plaza",
    "Museum",
    "Library",
)


def category_options(categories: Sequence[str]) -> Tuple[str, ...]:
    """Options for a category dropdown: ALL first, then the declared categories."""
    return (ALL, *categories)


def check_selection(selection: str, categories: Sequence[str], kind: str = "category") -> str:
    """Return ``selection`` if it is ALL or a declared category.

    Selections are rejected rather than widening the list at runtime. Records
    carrying an undeclared category are still stored and shown under ALL.
    """
    if selection == ALL or selection in categories:
        return selection
    logger.warning(f'Rejected {kind} selection {selection!r}')
    raise UnknownCategoryError(f'Unknown {kind} {selection!r}; expected one of {list(category_options(categories))}')


__all__ = [
    "ALL",
    "INCIDENT_CATEGORIES",
    "VENUE_CATEGORIES",
    "category_options",
    "check_selection",
]
