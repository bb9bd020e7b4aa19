"""
Sorting module.
Maps a sort identifier to a comparator over movies and applies it with a stable sort.
"""

from functools import cmp_to_key  # adapt comparators to sorted()
from typing import Callable, Iterable, List, Optional

from loguru import logger  # console logging
from pyuca import Collator  # Unicode Collation Algorithm for titles

from .models import Movie, SortKey

Comparator = Callable[[Movie, Movie], int]


def _cmp(a, b) -> int:
	return (a > b) - (a < b)


# Shared by every title sort
_COLLATOR = Collator()


def _title_key(movie: Movie) -> tuple:
	return _COLLATOR.sort_key((movie.title or '').casefold())


def _by_year_desc(a: Movie, b: Movie) -> int:
	return _cmp(b.year or 0, a.year or 0)


def _by_year_asc(a: Movie, b: Movie) -> int:
	return _cmp(a.year or 0, b.year or 0)


def _by_rating_desc(a: Movie, b: Movie) -> int:
	return _cmp(b.rating or 0.0, a.rating or 0.0)


def _by_rating_asc(a: Movie, b: Movie) -> int:
	return _cmp(a.rating or 0.0, b.rating or 0.0)


def _by_title_asc(a: Movie, b: Movie) -> int:
	return _cmp(_title_key(a), _title_key(b))


def _by_title_desc(a: Movie, b: Movie) -> int:
	return _cmp(_title_key(b), _title_key(a))


def _identity(a: Movie, b: Movie) -> int:
	return 0


COMPARATORS = {
	SortKey.NEWEST: _by_year_desc,
	SortKey.OLDEST: _by_year_asc,
	SortKey.HIGHEST_RATED: _by_rating_desc,
	SortKey.LOWEST_RATED: _by_rating_asc,
	SortKey.TITLE_ASC: _by_title_asc,
	SortKey.TITLE_DESC: _by_title_desc,
}


def get_comparator(sort_key: Optional[str]) -> Comparator:
	"""
	Return the comparator for a sort identifier.
	Unknown or missing identifiers get a comparator that treats every pair as
	equal, so a stable sort leaves the input order untouched.
	"""
	comparator = COMPARATORS.get(sort_key) if isinstance(sort_key, str) else None
	if comparator is None:
		logger.debug(f"[Sort] Unrecognized sort key {sort_key!r}; keeping input order")
		return _identity
	return comparator


def apply_sorting(movies: Iterable[Movie], sort_key: Optional[str]) -> List[Movie]:
	"""Return a new list sorted by sort_key; equal keys keep their input order."""
	return sorted(movies, key=cmp_to_key(get_comparator(sort_key)))  # sorted() is stable
