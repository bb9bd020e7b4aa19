"""
Data models for the Movie Watchlist query engine.
Defines the records and value objects passed through search, filtering and sorting.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
from datetime import datetime  # creation/update timestamps
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union


class InvalidInput(ValueError):
	"""Raised when the engine receives data that is not movie-shaped."""


@dataclass
class Movie:
	"""
	Represents a single movie on a user's watchlist.
	Only title, genre, year, rating and comment take part in search/filter/sort;
	the remaining fields are carried along for the callers that display them.
	"""
	id: str  # opaque unique identifier, never changed after creation
	title: str  # display title as the user typed it
	genre: str  # one genre name from an open set (e.g., "Sci-Fi")
	year: int  # release year
	rating: float = 0.0  # user rating; scale is a caller convention (0-5 or 0-10)
	comment: Optional[str] = None  # optional free-text review
	is_favorite: bool = False
	is_completed: bool = False
	watch_progress: float = 0.0  # fraction watched in [0, 1]
	duration: Optional[str] = None  # e.g. "120 min"
	poster: Optional[str] = None  # URI of the poster image
	owner_id: Optional[str] = None  # identity that owns this record
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class RatingRange:
	"""
	A half-open rating bucket [min, max) with a display label.
	Buckets whose top should include the scale maximum are configured with a
	slightly larger max (see filters.DEFAULT_RATING_RANGES).
	"""
	label: str
	min: float
	max: float

	def contains(self, rating: Optional[float]) -> bool:
		value = rating or 0.0  # missing rating counts as zero
		return self.min <= value < self.max

	@classmethod
	def from_dict(cls, data: Mapping[str, Any]) -> "RatingRange":
		if not isinstance(data, Mapping) or 'min' not in data or 'max' not in data:
			raise InvalidInput(f"Rating range needs 'min' and 'max': {data!r}")
		try:
			low, high = float(data['min']), float(data['max'])
		except (TypeError, ValueError) as e:
			raise InvalidInput(f"Rating range bounds must be numbers: {data!r}") from e
		label = str(data.get('label') or f"{low:g}-{high:g}")
		return cls(label=label, min=low, max=high)


class SortKey:
	"""Identifiers accepted by sorting.get_comparator."""
	NEWEST = 'newest'
	OLDEST = 'oldest'
	HIGHEST_RATED = 'highest_rated'
	LOWEST_RATED = 'lowest_rated'
	TITLE_ASC = 'title_asc'
	TITLE_DESC = 'title_desc'

	DEFAULT = NEWEST


# Sort options in the order they are offered to users, with display labels
SORT_OPTIONS: List[Dict[str, str]] = [
	{'id': SortKey.NEWEST, 'label': 'Newest First'},
	{'id': SortKey.OLDEST, 'label': 'Oldest First'},
	{'id': SortKey.HIGHEST_RATED, 'label': 'Highest Rated'},
	{'id': SortKey.LOWEST_RATED, 'label': 'Lowest Rated'},
	{'id': SortKey.TITLE_ASC, 'label': 'Title (A-Z)'},
	{'id': SortKey.TITLE_DESC, 'label': 'Title (Z-A)'},
]


@dataclass
class FilterSpec:
	"""
	Filter and sort parameters for a single query.
	An empty set/list on any dimension means "no constraint" on that dimension.
	"""
	genres: Set[str] = field(default_factory=set)  # exact, case-sensitive genre names
	years: Set[Union[str, int]] = field(default_factory=set)  # years as text or numbers
	rating_ranges: List[RatingRange] = field(default_factory=list)  # OR-ed buckets
	sort: Optional[str] = SortKey.DEFAULT  # one of SortKey; unknown keys keep input order

	def is_empty(self) -> bool:
		return not (self.genres or self.years or self.rating_ranges)

	@classmethod
	def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FilterSpec":
		"""
		Build a FilterSpec from a plain mapping such as a parsed JSON body.
		Accepts both camelCase ("ratingRanges") and snake_case keys; ranges may be
		RatingRange objects or {label, min, max} mappings. Unknown keys are ignored.
		"""
		if data is None:
			return cls()
		if not isinstance(data, Mapping):
			raise InvalidInput(f"Filter specification must be a mapping, got {type(data).__name__}")

		raw_ranges = data.get('rating_ranges', data.get('ratingRanges')) or []
		ranges = [r if isinstance(r, RatingRange) else RatingRange.from_dict(r) for r in raw_ranges]

		spec = cls(
			genres=set(_as_iterable(data.get('genres'))),
			years=set(_as_iterable(data.get('years'))),
			rating_ranges=ranges,
		)
		if data.get('sort'):
			spec.sort = str(data['sort'])
		return spec


def _as_iterable(value: Any) -> Iterable:
	# A lone string is a single selection, not a sequence of characters
	if value is None:
		return []
	if isinstance(value, (str, int)):
		return [value]
	return value
