"""
Print a watchlist report.

This script:
1) Loads movies from data/movies.jsonl (or --data)
2) Computes statistics for every owner (or just --owner)
3) Optionally lists each owner's movies in --sort order

Usage:
    python -m scripts.watchlist_report --owner demo --sort highest_rated
"""

import argparse  # command-line options
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from watchlist.data_loader import DataLoader, MovieStore  # data ingestion
from watchlist.query_engine import QueryEngine  # search -> filter -> sort pipeline


def _parse_args(argv=None):
	root = Path(__file__).resolve().parents[1]  # project root
	parser = argparse.ArgumentParser(description="Summarize movie watchlists")
	parser.add_argument('--data', default=str(root / 'data' / 'movies.jsonl'), help="JSONL dataset")
	parser.add_argument('--owner', default=None, help="only report this owner")
	parser.add_argument('--sort', default=None, help="also list movies in this sort order")
	return parser.parse_args(argv)


def main(argv=None):
	args = _parse_args(argv)

	logger.info("=" * 60)
	logger.info("Watchlist Report")
	logger.info("=" * 60)

	loader = DataLoader()
	movies = loader.load_movies_from_jsonl(args.data)
	engine = QueryEngine(MovieStore(movies).fetch_movies)

	owners = [args.owner] if args.owner else loader.get_all_owners(movies)
	for owner in owners:
		stats = engine.stats(owner)
		logger.info(f"\nOwner: {owner}")
		logger.info(f"  Movies: {stats.total_movies} | completed: {stats.completed_movies} | favorites: {stats.favorite_movies}")
		logger.info(f"  Average rating: {stats.average_rating} | added this week: {stats.added_this_week}")
		logger.info(f"  Genres: {stats.genre_distribution}")
		logger.info(f"  Ratings: {stats.rating_distribution}")

		if args.sort:
			for i, m in enumerate(engine.search(owner, '', {'sort': args.sort}), 1):
				logger.info(f"  {i}. {m.title} ({m.year}) - {m.genre} - {m.rating:g}")

	logger.info("=" * 60)


if __name__ == '__main__':
	main()
