"""
Score Storage Client

Talks to the saved-score HTTP API. When the server cannot be reached, saves
and listings fall back to a local JSON cache so the user action still
succeeds.
"""

from typing import List, NamedTuple, Optional

import requests
from loguru import logger

from .score_store import InvalidScoreRecordError, JsonScoreStore, SavedScore, ScoreStorageError


class SaveOutcome(NamedTuple):
    """Where a saved score ended up."""
    score: SavedScore
    remote: bool


class ScoreStorageClient:
    """Client for ``/scores`` with a local fallback cache."""

    def __init__(
        self,
        base_url: str,
        fallback_store: JsonScoreStore,
        timeout: float = 5,
        session: Optional[requests.Session] = None
    ):
        """Initialize the client.

        Args:
            base_url: API root, e.g. http://localhost:3001/api
            fallback_store: Local cache used when the server is unreachable
            timeout: Request timeout in seconds
            session: Optional requests session (injected in tests)
        """
        self.base_url = base_url.rstrip('/')
        self.fallback_store = fallback_store
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def is_available(self) -> bool:
        """Check whether the API answers its health probe."""
        try:
            response = self.session.get(self._url('health'), timeout=self.timeout)
            return response.ok
        except requests.RequestException as e:
            logger.debug(f"Score server not reachable at {self.base_url}: {e}")
            return False

    def save(self, score: SavedScore) -> SaveOutcome:
        """Save a score on the server, or locally if the server fails."""
        try:
            response = self.session.post(self._url('scores'), json=score.to_dict(), timeout=self.timeout)
            response.raise_for_status()
            logger.info(f"Saved score '{score.name}' to {self.base_url}")
            return SaveOutcome(score, remote=True)

        except requests.RequestException as e:
            logger.error(f"Error saving score to server: {e}")
            self.fallback_store.append(score)
            logger.warning(f"Saved score '{score.name}' locally to {self.fallback_store.path} instead")
            return SaveOutcome(score, remote=False)

    def list_scores(self) -> List[SavedScore]:
        """Saved scores from the server, or from the local cache on failure."""
        try:
            response = self.session.get(self._url('scores'), timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, list):
                raise ValueError("expected a JSON array of scores")
            return self._parse_scores(payload)

        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error loading scores from server: {e}")
            return self.fallback_store.list_scores()

    def _parse_scores(self, payload: List) -> List[SavedScore]:
        scores = []
        for item in payload:
            try:
                scores.append(SavedScore.from_dict(item))
            except InvalidScoreRecordError as e:
                logger.warning(f"Skipping invalid saved score from server: {e}")
        return scores

    def delete(self, score_id: str) -> None:
        """Delete a score on the server and from the local cache.

        Raises:
            ScoreStorageError: If the server call fails
        """
        self.fallback_store.delete(score_id)

        try:
            response = self.session.delete(self._url(f'scores/{score_id}'), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Error deleting score {score_id} from server: {e}")
            raise ScoreStorageError(f"Failed to delete score {score_id} from server") from e
