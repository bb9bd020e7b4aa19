"""
Query engine module.
Runs the Search -> Filter -> Sort pipeline over an owner's movies and exposes
the watchlist lookups (favorites, continue watching, years, statistics).
"""

from collections.abc import Iterable, Mapping  # shape checks on caller input
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Union

# Import project modules for data structures and pipeline stages
from .models import FilterSpec, InvalidInput, Movie, SortKey  # core data classes
from .search import build_search_predicate  # free-text matcher
from .filters import DEFAULT_RATING_RANGES, build_filter_predicate  # genre/year/rating predicate
from .sorting import apply_sorting  # stable comparator sort
from .stats import WatchlistStats, compute_stats  # watchlist summaries

# Import loguru for console logging
from loguru import logger  # simple structured logger

FetchMovies = Callable[[Optional[str]], Sequence[Movie]]
FilterInput = Union[FilterSpec, Mapping, None]


def _check_movies(movies) -> List[Movie]:
	"""Validate the collection shape and return a private list copy."""
	if movies is None:
		raise InvalidInput("Movie collection is required, got None")
	if isinstance(movies, (str, bytes, Mapping)) or not isinstance(movies, Iterable):
		raise InvalidInput(f"Movie collection must be a sequence of movies, got {type(movies).__name__}")
	snapshot = list(movies)
	for position, movie in enumerate(snapshot):
		if not isinstance(movie, Movie):
			raise InvalidInput(f"Item {position} is not a Movie: {type(movie).__name__}")
	return snapshot


def _check_filter_spec(filter_spec: FilterInput) -> FilterSpec:
	if isinstance(filter_spec, FilterSpec):
		return filter_spec
	if filter_spec is None or isinstance(filter_spec, Mapping):
		return FilterSpec.from_dict(filter_spec)
	raise InvalidInput(f"Filter specification must be a FilterSpec or mapping, got {type(filter_spec).__name__}")


def query(movies: Sequence[Movie], search_query: Optional[str] = '', filter_spec: FilterInput = None) -> List[Movie]:
	"""
	Apply search, then filters, then sorting, and return a new list.
	The input collection and its records are never modified.
	"""
	snapshot = _check_movies(movies)
	spec = _check_filter_spec(filter_spec)
	if search_query is not None and not isinstance(search_query, str):
		raise InvalidInput(f"Search query must be text, got {type(search_query).__name__}")
	if not snapshot:
		return []

	# 1) Free-text search
	matches_search = build_search_predicate(search_query)
	result = [m for m in snapshot if matches_search(m)]
	logger.debug(f"[Engine] Search '{search_query or ''}' kept {len(result)} of {len(snapshot)} movies")

	# 2) Genre/year/rating filters
	matches_filter = build_filter_predicate(spec)
	result = [m for m in result if matches_filter(m)]
	logger.debug(f"[Engine] Filters kept {len(result)} movies")

	# 3) Sort; an unset key falls back to newest first
	sort_key = spec.sort or SortKey.DEFAULT
	return apply_sorting(result, sort_key)


class QueryEngine:
	"""
	High-level watchlist API binding the query pipeline to a movie source.
	The source is any callable returning an owner's movies, e.g. MovieStore.fetch_movies.
	"""
	def __init__(self, fetch_movies: FetchMovies, rating_ranges=DEFAULT_RATING_RANGES):
		self.fetch_movies = fetch_movies  # external collection retrieval
		self.rating_ranges = list(rating_ranges)  # buckets used by statistics

	def _movies(self, owner_id: Optional[str]) -> List[Movie]:
		movies = _check_movies(self.fetch_movies(owner_id))
		logger.debug(f"[Engine] Fetched {len(movies)} movies for owner={owner_id}")
		return movies

	def search(self, owner_id: Optional[str], search_query: Optional[str] = '', filter_spec: FilterInput = None) -> List[Movie]:
		"""Run the full pipeline over the owner's current movies."""
		results = query(self._movies(owner_id), search_query, filter_spec)
		logger.info(f"[Engine] Returning {len(results)} movies for owner={owner_id}")
		return results

	def favorites(self, owner_id: Optional[str]) -> List[Movie]:
		return [m for m in self._movies(owner_id) if m.is_favorite]

	def completed(self, owner_id: Optional[str]) -> List[Movie]:
		return [m for m in self._movies(owner_id) if m.is_completed]

	def continue_watching(self, owner_id: Optional[str], search_query: Optional[str] = '') -> List[Movie]:
		"""Movies not yet completed, optionally narrowed by a search query."""
		matches_search = build_search_predicate(search_query)
		return [m for m in self._movies(owner_id) if not m.is_completed and matches_search(m)]

	def available_years(self, owner_id: Optional[str]) -> List[int]:
		"""Distinct years on the watchlist, newest first."""
		return sorted({m.year for m in self._movies(owner_id)}, reverse=True)

	def available_genres(self, owner_id: Optional[str]) -> List[str]:
		return sorted({m.genre for m in self._movies(owner_id) if m.genre})

	def stats(self, owner_id: Optional[str], now: Optional[datetime] = None) -> WatchlistStats:
		return compute_stats(self._movies(owner_id), self.rating_ranges, now=now)
