"""
Filter predicate module.
Turns a FilterSpec (genres, years, rating buckets) into a single predicate over movies,
and holds the rating bucket configuration used by filters and statistics.
"""

import json  # read bucket configuration files
from pathlib import Path  # filesystem-safe paths
from typing import Callable, Iterable, List, Optional, Sequence

from loguru import logger  # console logging

from .models import FilterSpec, InvalidInput, Movie, RatingRange

Predicate = Callable[[Movie], bool]


# Rating buckets offered by default. Intervals are half-open, so the top of each
# bucket is widened by 0.1 to include a whole-number rating such as 5.0 or 4.0.
DEFAULT_RATING_RANGES: List[RatingRange] = [
	RatingRange(label='4-5 Excellent', min=4, max=5.1),
	RatingRange(label='3-4 Great', min=3, max=4.1),
	RatingRange(label='2-3 Good', min=2, max=3.1),
	RatingRange(label='1-2 Average', min=1, max=2.1),
	RatingRange(label='Below 1', min=0, max=1),
]


def load_rating_ranges(filepath: str) -> List[RatingRange]:
	"""
	Load rating buckets from a JSON file holding a list of {label, min, max} objects.
	"""
	filepath = Path(filepath)
	if not filepath.exists():
		raise FileNotFoundError(f"Rating range file not found: {filepath}")

	with open(filepath, 'r', encoding='utf-8') as f:
		data = json.load(f)
	if not isinstance(data, list):
		raise InvalidInput(f"Rating range file must contain a list, got {type(data).__name__}")

	ranges = [RatingRange.from_dict(item) for item in data]
	logger.info(f"[Filters] Loaded {len(ranges)} rating ranges from {filepath}")
	return ranges


def ranges_for_labels(labels: Iterable[str], ranges: Sequence[RatingRange] = DEFAULT_RATING_RANGES) -> List[RatingRange]:
	"""Resolve selected display labels to their buckets; unknown labels are dropped."""
	wanted = set(labels)
	selected = [r for r in ranges if r.label in wanted]
	unknown = wanted - {r.label for r in selected}
	if unknown:
		logger.warning(f"[Filters] Ignoring unknown rating labels: {sorted(unknown)}")
	return selected


def build_filter_predicate(filter_spec: Optional[FilterSpec]) -> Predicate:
	"""
	Combine the genre, year and rating dimensions of a FilterSpec into one predicate.
	Dimensions are AND-ed; the values selected within a dimension are OR-ed.
	An empty dimension does not constrain.
	"""
	if filter_spec is None or filter_spec.is_empty():
		return lambda movie: True

	# Frozen copies: later edits to filter_spec do not change this predicate
	genres = frozenset(filter_spec.genres or ())
	years = frozenset(str(y) for y in (filter_spec.years or ()))
	ranges = tuple(filter_spec.rating_ranges or ())
	logger.debug(f"[Filters] genres={sorted(genres)} years={sorted(years)} ranges={[r.label for r in ranges]}")

	def matches(movie: Movie) -> bool:
		# Genre names are compared exactly; "sci-fi" and "Sci-Fi" are different genres
		if genres and movie.genre not in genres:
			return False
		if years and str(movie.year) not in years:
			return False
		if ranges and not any(r.contains(movie.rating) for r in ranges):
			return False
		return True

	return matches
