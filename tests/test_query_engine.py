"""
Tests for the Search -> Filter -> Sort pipeline and the QueryEngine lookups.
Run: python tests/test_query_engine.py
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from watchlist.data_loader import MovieStore
from watchlist.models import FilterSpec, InvalidInput, Movie, RatingRange, SortKey
from watchlist.query_engine import QueryEngine, query
from watchlist.sorting import apply_sorting


def make_movie(title, genre='Drama', year=2020, rating=3.0, **extra):
	return Movie(id=title.lower(), title=title, genre=genre, year=year, rating=rating, **extra)


DUNE = make_movie("Dune", genre="Sci-Fi", year=2021, rating=4.5)
GHOSTED = make_movie("Ghosted", genre="Action", year=2023, rating=2.0)


def watchlist():
	return [
		make_movie("Dune", genre="Sci-Fi", year=2021, rating=4.5, comment="desert power", is_favorite=True, is_completed=True),
		make_movie("Ghosted", genre="Action", year=2023, rating=2.0, is_completed=True),
		make_movie("Coco", genre="Animation", year=2017, rating=5.0, is_favorite=True),
		make_movie("Morbius", genre="Action", year=2022, rating=0.5),
		make_movie("Dune: Part Two", genre="Sci-Fi", year=2024, rating=4.8, watch_progress=0.3),
	]


def titles(movies):
	return [m.title for m in movies]


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def assert_true(cond, msg):
	if not cond:
		raise AssertionError(msg)


def assert_invalid(fn, msg):
	try:
		fn()
	except InvalidInput:
		return
	raise AssertionError(msg)


def test_scenario():
	movies = [DUNE, GHOSTED]
	assert_equal(titles(query(movies, "", {"sort": "highest_rated"})), ["Dune", "Ghosted"], "highest rated")
	assert_equal(titles(query(movies, "dune", {})), ["Dune"], "search")
	assert_equal(titles(query(movies, "", {"genres": ["Action"]})), ["Ghosted"], "genre filter")
	assert_equal(titles(query(movies, "", {"ratingRanges": [{"min": 4, "max": 5.1}]})), ["Dune"], "rating bucket")


def test_identity_law():
	movies = watchlist()
	result = query(movies, "", {})
	assert_equal(len(result), len(movies), "same length")
	assert_equal({m.id for m in result}, {m.id for m in movies}, "same elements")
	assert_equal(result, apply_sorting(movies, SortKey.NEWEST), "ordered by the default key")
	assert_equal(query(movies, "", None), result, "None spec behaves like an empty one")
	assert_equal(query(movies, None, FilterSpec(sort=None)), result, "unset sort defaults to newest")


def test_unknown_sort_keeps_order():
	movies = watchlist()
	assert_equal(query(movies, "", {"sort": "most_watched"}), movies, "unknown sort is a no-op")


def test_filter_monotonicity():
	movies = watchlist()
	specs = [
		{},
		{"genres": ["Action"]},
		{"years": ["1999"]},
		{"genres": ["Sci-Fi"], "ratingRanges": [{"min": 4.6, "max": 5.1}]},
		FilterSpec(rating_ranges=[RatingRange("none", 3, 1)]),
	]
	for spec in specs:
		assert_true(len(query(movies, "", spec)) <= len(movies), f"filter never grows the list: {spec}")


def test_search_substring_law():
	movies = watchlist()
	for q in ("dune", "DUNE", "o", "part"):
		result = query(movies, q, {})
		for m in movies:
			if q.lower() in m.title.lower():
				assert_true(m in result, f"'{m.title}' should match '{q}'")


def test_search_then_filter_then_sort():
	movies = watchlist()
	result = query(movies, "dune", {"ratingRanges": [{"min": 4.6, "max": 5.1}], "sort": "title_asc"})
	assert_equal(titles(result), ["Dune: Part Two"], "search and filter compose")

	result = query(movies, "sci", {"sort": "oldest"})
	assert_equal(titles(result), ["Dune", "Dune: Part Two"], "genre text searched then sorted")


def test_input_untouched():
	movies = watchlist()
	before = [(m.id, m.title, m.rating) for m in movies]
	result = query(movies, "", {"sort": "title_desc"})
	assert_equal([(m.id, m.title, m.rating) for m in movies], before, "records and order untouched")
	assert_true(result is not movies, "new list returned")


def test_empty_input():
	assert_equal(query([], "dune", {"genres": ["Action"]}), [], "empty in, empty out")


def test_invalid_input():
	assert_invalid(lambda: query(None, "", {}), "None collection")
	assert_invalid(lambda: query("Dune", "", {}), "string is not a collection")
	assert_invalid(lambda: query([{"title": "Dune"}], "", {}), "dicts are not movies")
	assert_invalid(lambda: query([DUNE], "", ["Action"]), "list is not a filter spec")
	assert_invalid(lambda: query([DUNE], "", {"ratingRanges": [{"min": 1}]}), "range without max")
	assert_invalid(lambda: query([DUNE], 2021, {}), "search query must be text")


def test_engine_lookups():
	store = MovieStore(watchlist())
	engine = QueryEngine(store.fetch_movies)
	assert_equal(titles(engine.search(None, "dune", {"sort": "newest"})), ["Dune: Part Two", "Dune"], "engine search")
	assert_equal(sorted(titles(engine.favorites(None))), ["Coco", "Dune"], "favorites")
	assert_equal(sorted(titles(engine.completed(None))), ["Dune", "Ghosted"], "completed")
	assert_equal(sorted(titles(engine.continue_watching(None))), ["Coco", "Dune: Part Two", "Morbius"], "not completed")
	assert_equal(titles(engine.continue_watching(None, "part")), ["Dune: Part Two"], "continue watching search")
	assert_equal(engine.available_years(None), [2024, 2023, 2022, 2021, 2017], "years newest first")
	assert_equal(engine.available_genres(None), ["Action", "Animation", "Sci-Fi"], "genres sorted")
	assert_equal(engine.stats(None).total_movies, 5, "stats through the engine")


def test_engine_scopes_by_owner():
	ts = datetime(2025, 1, 1, tzinfo=timezone.utc)
	movies = [
		make_movie("Mine", owner_id="u1", created_at=ts),
		make_movie("Theirs", owner_id="u2", created_at=ts),
	]
	engine = QueryEngine(MovieStore(movies).fetch_movies)
	assert_equal(titles(engine.search("u1")), ["Mine"], "only the owner's movies")
	assert_equal(engine.search("nobody"), [], "unknown owner has no movies")


def test_engine_rejects_bad_source():
	engine = QueryEngine(lambda owner_id: None)
	assert_invalid(lambda: engine.search("u1"), "source returning None is invalid")


def main():
	print("Running query engine tests...")
	test_scenario()
	test_identity_law()
	test_unknown_sort_keeps_order()
	test_filter_monotonicity()
	test_search_substring_law()
	test_search_then_filter_then_sort()
	test_input_untouched()
	test_empty_input()
	test_invalid_input()
	test_engine_lookups()
	test_engine_scopes_by_owner()
	test_engine_rejects_bad_source()
	print("All query engine tests passed!")


if __name__ == '__main__':
	main()
