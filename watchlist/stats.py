"""
Statistics module.
Summarizes a watchlist: counts, average rating, and genre/year/rating distributions.
"""

from collections import Counter  # tally genres and years
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger  # console logging

from .filters import DEFAULT_RATING_RANGES
from .models import Movie, RatingRange


@dataclass
class WatchlistStats:
	total_movies: int = 0
	completed_movies: int = 0
	favorite_movies: int = 0
	average_rating: float = 0.0  # mean over rated movies only (rating > 0)
	added_this_week: int = 0
	genre_distribution: Dict[str, int] = field(default_factory=dict)
	year_distribution: List[Tuple[int, int]] = field(default_factory=list)  # (year, count), newest first
	rating_distribution: Dict[str, int] = field(default_factory=dict)  # bucket label -> count


def _as_aware(ts: datetime) -> datetime:
	# Naive timestamps are taken to be UTC
	return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def compute_stats(
	movies: Sequence[Movie],
	ranges: Sequence[RatingRange] = DEFAULT_RATING_RANGES,
	now: Optional[datetime] = None,
) -> WatchlistStats:
	"""
	Compute watchlist statistics.
	Rating buckets use the same half-open test as the rating filter, so a bucket
	count always equals the size of the filtered list for that bucket.
	"""
	now = _as_aware(now or datetime.now(timezone.utc))
	week_ago = now - timedelta(days=7)

	rated = [m.rating for m in movies if (m.rating or 0.0) > 0]
	average = round(sum(rated) / len(rated), 1) if rated else 0.0

	genres = Counter(m.genre for m in movies)
	years = Counter(m.year for m in movies)

	stats = WatchlistStats(
		total_movies=len(movies),
		completed_movies=sum(1 for m in movies if m.is_completed),
		favorite_movies=sum(1 for m in movies if m.is_favorite),
		average_rating=average,
		added_this_week=sum(1 for m in movies if m.created_at and _as_aware(m.created_at) > week_ago),
		genre_distribution={g: genres[g] for g in sorted(genres)},
		year_distribution=sorted(years.items(), key=lambda item: item[0] or 0, reverse=True),
		rating_distribution={r.label: sum(1 for m in movies if r.contains(m.rating)) for r in ranges},
	)
	logger.debug(
		f"[Stats] total={stats.total_movies} completed={stats.completed_movies} favorites={stats.favorite_movies} avg={stats.average_rating}"
	)
	return stats
