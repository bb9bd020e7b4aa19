"""
FastAPI server exposing the watchlist query API.
Endpoints:
- GET /health: basic health check
- GET /movies?owner_id=...&q=...&genres=...&years=...&ratings=...&sort=...: search, filter and sort
- POST /movies/query: same pipeline with a JSON filter specification
- GET /movies/years, /movies/genres: values available for filtering
- GET /movies/favorites, /movies/continue-watching: watchlist subsets
- GET /movies/stats: watchlist statistics
- GET /filters/options: rating buckets and sort options

Settings come from the environment:
- WATCHLIST_DATA_PATH: JSONL dataset (default data/movies.jsonl)
- WATCHLIST_RATING_RANGES: optional JSON file of {label, min, max} rating buckets

Run: uvicorn api:app --reload
"""

# Import standard libraries for env settings and timing
import os  # env-based settings
import time  # measure startup and request latencies
from contextlib import asynccontextmanager  # app lifespan hook
from typing import Any, Dict, List, Optional, Tuple  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import FastAPI, Query, Request  # FastAPI primitives
from fastapi.responses import JSONResponse  # error payloads
from pydantic import BaseModel  # response schema definitions

# Import our internal modules for data loading and querying
from watchlist.data_loader import MovieStore  # loads movies and serves them per owner
from watchlist.filters import DEFAULT_RATING_RANGES, load_rating_ranges, ranges_for_labels
from watchlist.models import SORT_OPTIONS, FilterSpec, InvalidInput, Movie, SortKey
from watchlist.query_engine import QueryEngine  # search -> filter -> sort pipeline

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

DEFAULT_DATA_PATH = 'data/movies.jsonl'

# Globals that hold the engine instance and measured startup time
ENGINE: Optional[QueryEngine] = None  # will point to the initialized engine
STORE: Optional[MovieStore] = None
STARTUP_TIME_S: float = 0.0  # measures how long startup took


# Pydantic model that describes the shape of a single movie in responses
class MovieOut(BaseModel):
	id: str
	title: str
	genre: str
	year: int
	rating: float
	comment: Optional[str] = None
	isFavorite: bool = False
	isCompleted: bool = False
	watchProgress: float = 0.0
	duration: Optional[str] = None
	poster: Optional[str] = None
	createdAt: Optional[str] = None
	updatedAt: Optional[str] = None


class MovieListResponse(BaseModel):
	owner_id: Optional[str] = None
	query: str = ''
	sort: Optional[str] = None
	count: int
	elapsed_ms: float = 0.0
	results: List[MovieOut]


class QueryRequest(BaseModel):
	owner_id: Optional[str] = None
	q: str = ''
	filters: Optional[Dict[str, Any]] = None  # {genres, years, ratingRanges: [{label, min, max}], sort}


class RatingRangeOut(BaseModel):
	label: str
	min: float
	max: float


class SortOptionOut(BaseModel):
	id: str
	label: str


class FilterOptionsResponse(BaseModel):
	genres: List[str]
	years: List[int]
	rating_ranges: List[RatingRangeOut]
	sort_options: List[SortOptionOut]


class StatsResponse(BaseModel):
	totalMovies: int
	completedMovies: int
	favoriteMovies: int
	averageRating: float
	addedThisWeek: int
	genreDistribution: Dict[str, int]
	yearDistribution: List[Tuple[int, int]]
	ratingDistribution: Dict[str, int]


def movie_out(m: Movie) -> MovieOut:
	return MovieOut(
		id=m.id,
		title=m.title,
		genre=m.genre,
		year=m.year,
		rating=m.rating,
		comment=m.comment,
		isFavorite=m.is_favorite,
		isCompleted=m.is_completed,
		watchProgress=m.watch_progress,
		duration=m.duration,
		poster=m.poster,
		createdAt=m.created_at.isoformat() if m.created_at else None,
		updatedAt=m.updated_at.isoformat() if m.updated_at else None,
	)


def get_engine() -> QueryEngine:
	if ENGINE is None:
		raise RuntimeError("Engine not initialized")
	return ENGINE


async def startup_event():
	"""Load the movie store and rating buckets, then build the engine."""
	global ENGINE, STORE, STARTUP_TIME_S  # refer to module-level globals
	start = time.time()

	data_path = os.environ.get('WATCHLIST_DATA_PATH', DEFAULT_DATA_PATH)
	ranges_path = os.environ.get('WATCHLIST_RATING_RANGES')
	logger.info(f"[API] Startup: loading movies from {data_path}...")

	STORE = MovieStore.from_jsonl(data_path)
	ranges = load_rating_ranges(ranges_path) if ranges_path else DEFAULT_RATING_RANGES
	ENGINE = QueryEngine(STORE.fetch_movies, rating_ranges=ranges)

	STARTUP_TIME_S = time.time() - start
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s with {len(STORE)} movies and {len(ranges)} rating ranges.")


# Lifespan hook to load the dataset once per process
@asynccontextmanager
async def lifespan(app: FastAPI):
	await startup_event()
	yield


# Instantiate the FastAPI application with metadata
app = FastAPI(title="Movie Watchlist API", version="1.0.0", lifespan=lifespan)  # web app


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
	logger.warning(f"[API] Rejected {request.url.path}: {exc}")
	return JSONResponse(status_code=400, content={"success": False, "message": str(exc)})


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness and readiness checks."""
	return {
		"status": "ok",
		"engine_ready": ENGINE is not None,
		"movie_count": len(STORE) if STORE is not None else 0,
		"startup_seconds": round(STARTUP_TIME_S, 2),
	}


@app.get("/movies", response_model=MovieListResponse)
async def list_movies(
	owner_id: Optional[str] = None,
	q: str = Query('', description="Free-text search over title, genre, comment and year"),
	genres: List[str] = Query([]),
	years: List[str] = Query([]),
	ratings: List[str] = Query([], description="Rating bucket labels, e.g. '4-5 Excellent'"),
	sort: str = SortKey.DEFAULT,
):
	"""Search, filter and sort an owner's movies."""
	engine = get_engine()
	start = time.time()
	logger.debug(f"[API] /movies owner={owner_id} q='{q}' genres={genres} years={years} ratings={ratings} sort={sort}")

	spec = FilterSpec(
		genres=set(genres),
		years=set(years),
		rating_ranges=ranges_for_labels(ratings, engine.rating_ranges),
		sort=sort,
	)
	results = engine.search(owner_id, q, spec)
	elapsed_ms = (time.time() - start) * 1000
	logger.info(f"[API] /movies served {len(results)} results in {elapsed_ms:.2f} ms")

	return MovieListResponse(
		owner_id=owner_id,
		query=q,
		sort=sort,
		count=len(results),
		elapsed_ms=round(elapsed_ms, 2),
		results=[movie_out(m) for m in results],
	)


@app.post("/movies/query", response_model=MovieListResponse)
async def query_movies(body: QueryRequest):
	"""Same pipeline as GET /movies, with the filter specification sent as JSON."""
	engine = get_engine()
	start = time.time()
	spec = FilterSpec.from_dict(body.filters)  # raises InvalidInput on malformed ranges
	results = engine.search(body.owner_id, body.q, spec)
	elapsed_ms = (time.time() - start) * 1000
	logger.info(f"[API] /movies/query served {len(results)} results in {elapsed_ms:.2f} ms")
	return MovieListResponse(
		owner_id=body.owner_id,
		query=body.q,
		sort=spec.sort,
		count=len(results),
		elapsed_ms=round(elapsed_ms, 2),
		results=[movie_out(m) for m in results],
	)


@app.get("/movies/years", response_model=List[int])
async def movie_years(owner_id: Optional[str] = None):
	return get_engine().available_years(owner_id)


@app.get("/movies/genres", response_model=List[str])
async def movie_genres(owner_id: Optional[str] = None):
	return get_engine().available_genres(owner_id)


@app.get("/movies/favorites", response_model=MovieListResponse)
async def favorite_movies(owner_id: Optional[str] = None):
	results = get_engine().favorites(owner_id)
	return MovieListResponse(owner_id=owner_id, count=len(results), results=[movie_out(m) for m in results])


@app.get("/movies/continue-watching", response_model=MovieListResponse)
async def continue_watching(owner_id: Optional[str] = None, q: str = ''):
	results = get_engine().continue_watching(owner_id, q)
	return MovieListResponse(owner_id=owner_id, query=q, count=len(results), results=[movie_out(m) for m in results])


@app.get("/movies/stats", response_model=StatsResponse)
async def movie_stats(owner_id: Optional[str] = None):
	s = get_engine().stats(owner_id)
	return StatsResponse(
		totalMovies=s.total_movies,
		completedMovies=s.completed_movies,
		favoriteMovies=s.favorite_movies,
		averageRating=s.average_rating,
		addedThisWeek=s.added_this_week,
		genreDistribution=s.genre_distribution,
		yearDistribution=s.year_distribution,
		ratingDistribution=s.rating_distribution,
	)


@app.get("/filters/options", response_model=FilterOptionsResponse)
async def filter_options(owner_id: Optional[str] = None):
	"""Everything a client needs to render its filter picker."""
	engine = get_engine()
	return FilterOptionsResponse(
		genres=engine.available_genres(owner_id),
		years=engine.available_years(owner_id),
		rating_ranges=[RatingRangeOut(label=r.label, min=r.min, max=r.max) for r in engine.rating_ranges],
		sort_options=[SortOptionOut(**o) for o in SORT_OPTIONS],
	)
