"""
Free-text search over a movie's textual fields.
"""

from typing import Callable, Optional

from loguru import logger  # console logging

from .models import Movie

Predicate = Callable[[Movie], bool]


def _match_all(movie: Movie) -> bool:
	return True


def build_search_predicate(query: Optional[str]) -> Predicate:
	"""
	Build a case-insensitive substring matcher for title, genre, comment and year.
	A blank query matches every movie.
	"""
	if not query or not query.strip():
		return _match_all

	needle = query.lower()
	logger.debug(f"[Search] Matching substring '{needle}'")

	def matches(movie: Movie) -> bool:
		return (
			needle in (movie.title or '').lower()
			or needle in (movie.genre or '').lower()
			or needle in (movie.comment or '').lower()
			or (movie.year is not None and needle in str(movie.year))
		)

	return matches
