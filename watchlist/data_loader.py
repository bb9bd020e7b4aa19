"""
Data loading module.
Loads watchlist records from JSONL into Movie objects and serves them per owner.
"""

# Standard libs for JSON parsing, timestamps, typing, and paths
import json  # read JSON lines
from datetime import datetime, timezone  # parse ISO timestamps
from typing import Any, Dict, List, Optional  # type hints
from pathlib import Path  # filesystem-safe paths

# Import our Movie data class used across the project
from .models import Movie  # structured movie record

# Console logging
from loguru import logger  # console logger


class DataLoader:
	"""
	Handles loading and normalizing watchlist records.
	Records may use the app's camelCase keys (isFavorite, watchProgress, createdAt)
	or snake_case keys.
	"""

	def load_movies_from_jsonl(self, filepath: str) -> List[Movie]:
		"""
		Load movies from a JSON Lines (JSONL) file where each line is one JSON object.
		Returns a list of Movie objects in file order.
		"""
		movies = []  # accumulator for parsed Movie objects
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Movie data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading movies from {filepath}...")  # log action

		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
				if not line.strip():  # tolerate blank lines
					continue
				try:
					data = json.loads(line)  # parse JSON object per line
					movies.append(self.parse_movie(data))  # convert dict -> Movie
				except json.JSONDecodeError as e:
					logger.warning(f"[DataLoader] Skipping invalid JSON at line {line_num}: {e}")  # malformed line
				except (TypeError, ValueError) as e:
					logger.warning(f"[DataLoader] Error parsing movie at line {line_num}: {e}")  # bad field values

		logger.info(f"[DataLoader] Successfully loaded {len(movies)} movies.")  # summary
		return movies

	def parse_movie(self, data: Dict[str, Any]) -> Movie:
		"""
		Convert a raw dictionary into a Movie with safe defaults.
		Missing rating becomes 0.0 and a missing comment stays None.
		"""
		if not isinstance(data, dict):
			raise TypeError(f"Expected a JSON object, got {type(data).__name__}")

		title = self._text_field(data, 'title')
		if not title:
			raise ValueError("Movie record has no title")

		def pick(snake: str, camel: str, default=None):
			# Prefer snake_case, fall back to the app's camelCase key
			value = data.get(snake)
			return data.get(camel, default) if value is None else value

		rating = data.get('rating')
		progress = pick('watch_progress', 'watchProgress')
		owner = pick('owner_id', 'ownerId')

		return Movie(
			id=str(data.get('id', '')),  # ensure ID is string
			title=title,
			genre=self._text_field(data, 'genre'),
			year=int(data['year']) if data.get('year') else 0,  # int year or 0
			rating=float(rating) if rating else 0.0,
			comment=data.get('comment'),
			is_favorite=bool(pick('is_favorite', 'isFavorite', False)),
			is_completed=bool(pick('is_completed', 'isCompleted', False)),
			watch_progress=float(progress) if progress else 0.0,
			duration=data.get('duration'),
			poster=data.get('poster'),
			owner_id=str(owner) if owner is not None else None,
			created_at=self._parse_timestamp(pick('created_at', 'createdAt')),
			updated_at=self._parse_timestamp(pick('updated_at', 'updatedAt')),
		)

	def _text_field(self, data: Dict[str, Any], key: str) -> str:
		"""Trimmed text value of key; missing becomes '', non-text is rejected."""
		value = data.get(key)
		if value is None:
			return ''
		if not isinstance(value, str):
			raise TypeError(f"Field '{key}' must be text, got {type(value).__name__}")
		return value.strip()

	def _parse_timestamp(self, value: Optional[str]) -> Optional[datetime]:
		"""Parse an ISO-8601 timestamp; a trailing 'Z' means UTC."""
		if not value:
			return None
		text = str(value).strip()
		if text.endswith('Z'):
			text = text[:-1] + '+00:00'
		parsed = datetime.fromisoformat(text)
		return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)

	def get_all_genres(self, movies: List[Movie]) -> List[str]:
		"""Return a sorted list of all unique genres in the dataset."""
		return sorted({m.genre for m in movies if m.genre})

	def get_all_owners(self, movies: List[Movie]) -> List[str]:
		"""Return a sorted list of owner ids present in the dataset."""
		return sorted({m.owner_id for m in movies if m.owner_id})


class MovieStore:
	"""
	Read-only, in-memory movie source.
	fetch_movies returns a fresh list per call, newest-created first.
	"""
	def __init__(self, movies: List[Movie]):
		self._movies = list(movies)

	@classmethod
	def from_jsonl(cls, filepath: str) -> "MovieStore":
		return cls(DataLoader().load_movies_from_jsonl(filepath))

	def __len__(self) -> int:
		return len(self._movies)

	def fetch_movies(self, owner_id: Optional[str] = None) -> List[Movie]:
		"""Movies owned by owner_id (all movies when owner_id is None)."""
		owned = [m for m in self._movies if owner_id is None or m.owner_id == owner_id]
		# Records without a creation time sort last
		return sorted(owned, key=lambda m: m.created_at.timestamp() if m.created_at else float('-inf'), reverse=True)
