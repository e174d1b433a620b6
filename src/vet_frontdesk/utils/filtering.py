"""
Case-insensitive substring filtering for the list screens.
"""

from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def normalize_term(term: Optional[str]) -> str:
    return (term or "").strip().casefold()


def matches_term(term: Optional[str], *fields: Optional[object]) -> bool:
    """
    Check whether any field contains the search term.

    An empty term matches everything. ``None`` fields are skipped and
    non-string fields are compared by their string form.
    """
    needle = normalize_term(term)
    if not needle:
        return True
    for value in fields:
        if value is None:
            continue
        if needle in str(value).casefold():
            return True
    return False


def filter_by_term(
    items: Iterable[T],
    term: Optional[str],
    fields: Callable[[T], Iterable[Optional[object]]],
) -> List[T]:
    """
    Keep the items whose searchable fields contain ``term``.

    Args:
        items: Records to filter, order is preserved
        term: Text typed by the user
        fields: Returns the searchable values of one record
    """
    if not normalize_term(term):
        return list(items)
    return [item for item in items if matches_term(term, *fields(item))]
