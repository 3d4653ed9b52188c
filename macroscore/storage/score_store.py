"""
Saved Score Store

Keeps saved scores as a pretty-printed UTF-8 JSON array, most recent first,
capped at ``max_entries``. Writes are serialized per file within the process
and land through a temp file plus rename, so a reader never sees a half
written array.
"""

import json
import os
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import pandas as pd
from loguru import logger

from ..models.results import ScoreResult


class ScoreStorageError(Exception):
    """Raised when saved scores cannot be written or reached."""


class InvalidScoreRecordError(ValueError):
    """Raised for a saved score payload that is missing required fields."""


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if value is None or value == '':
        raise InvalidScoreRecordError("Saved score is missing a timestamp")
    try:
        # Handles the browser's toISOString() form, e.g. 2024-05-01T12:00:00.000Z
        return pd.Timestamp(value).to_pydatetime()
    except (ValueError, TypeError) as e:
        raise InvalidScoreRecordError(f"Invalid timestamp '{value}': {e}") from e


@dataclass(frozen=True)
class SavedScore:
    """A scored record kept for recall and comparison."""
    id: str
    name: str
    timestamp: datetime
    total_score: float
    bias: str
    bias_color: str
    data: Dict[str, Any] = field(default_factory=dict)
    model: Optional[str] = None

    @classmethod
    def from_result(
        cls,
        result: ScoreResult,
        data: Mapping[str, Any],
        name: str,
        timestamp: Optional[datetime] = None,
        score_id: Optional[str] = None
    ) -> 'SavedScore':
        """Create a saved score from a fresh result and the record that produced it.

        Args:
            result: Score result to keep
            data: Indicator record as submitted
            name: Display name
            timestamp: Custom date; defaults to now
            score_id: Identifier; generated when omitted
        """
        return cls(
            id=score_id or uuid.uuid4().hex,
            name=name,
            timestamp=timestamp or datetime.now(),
            total_score=result.total_score,
            bias=result.bias_label,
            bias_color=result.bias_color,
            data=dict(data),
            model=result.model.value
        )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> 'SavedScore':
        """Parse the camelCase wire form."""
        if not isinstance(payload, Mapping):
            raise InvalidScoreRecordError("Saved score must be a JSON object")

        score_id = payload.get('id')
        if score_id is None or str(score_id).strip() == '':
            raise InvalidScoreRecordError("Saved score is missing an id")

        data = payload.get('data') or {}
        if not isinstance(data, Mapping):
            raise InvalidScoreRecordError("Saved score 'data' must be an object")

        try:
            total_score = float(payload.get('totalScore', 0.0))
        except (TypeError, ValueError) as e:
            raise InvalidScoreRecordError(f"Invalid totalScore: {payload.get('totalScore')!r}") from e

        return cls(
            id=str(score_id),
            name=str(payload.get('name', '')),
            timestamp=_parse_timestamp(payload.get('timestamp')),
            total_score=total_score,
            bias=str(payload.get('bias', '')),
            bias_color=str(payload.get('biasColor', '')),
            data=dict(data),
            model=payload.get('model')
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'id': self.id,
            'name': self.name,
            'timestamp': self.timestamp.isoformat(),
            'totalScore': self.total_score,
            'bias': self.bias,
            'biasColor': self.bias_color,
            'data': self.data,
        }
        if self.model is not None:
            result['model'] = self.model
        return result


class JsonScoreStore:
    """Bounded, most-recent-first list of saved scores in one JSON file."""

    _locks: Dict[str, threading.Lock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, path: Union[str, Path], max_entries: int = 50):
        """Initialize the store.

        Args:
            path: JSON file backing the store (created on first write)
            max_entries: Number of most recent scores retained
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.path = Path(path)
        self.max_entries = max_entries
        self._lock = self._lock_for(self.path)

    @classmethod
    def _lock_for(cls, path: Path) -> threading.Lock:
        key = str(path.resolve())
        with cls._locks_guard:
            if key not in cls._locks:
                cls._locks[key] = threading.Lock()
            return cls._locks[key]

    def _read(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading score store {self.path}: {e}")
            return []

        if not isinstance(records, list):
            logger.warning(f"Score store {self.path} does not hold a JSON array, ignoring contents")
            return []

        return [r for r in records if isinstance(r, dict)]

    def _write(self, records: List[Dict[str, Any]]) -> None:
        tmp_path = self.path.with_name(self.path.name + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Error writing score store {self.path}: {e}")
            raise ScoreStorageError(f"Failed to write {self.path}: {e}") from e

    def list_records(self) -> List[Dict[str, Any]]:
        """Raw saved score dicts, most recent first."""
        with self._lock:
            return self._read()[:self.max_entries]

    def list_scores(self) -> List[SavedScore]:
        """Saved scores, most recent first. Unparseable entries are skipped."""
        scores = []
        for record in self.list_records():
            try:
                scores.append(SavedScore.from_dict(record))
            except InvalidScoreRecordError as e:
                logger.warning(f"Skipping invalid saved score in {self.path}: {e}")
        return scores

    def get(self, score_id: str) -> Optional[SavedScore]:
        for record in self.list_records():
            if str(record.get('id')) == str(score_id):
                return SavedScore.from_dict(record)
        return None

    def append(self, score: SavedScore) -> SavedScore:
        """Add a score at the front, dropping the oldest beyond the cap."""
        with self._lock:
            records = self._read()
            records.insert(0, score.to_dict())
            self._write(records[:self.max_entries])

        logger.info(f"Saved score '{score.name}' ({score.id}) to {self.path}")
        return score

    def delete(self, score_id: str) -> bool:
        """Remove a score by id. Returns False if it was not present."""
        with self._lock:
            records = self._read()
            remaining = [r for r in records if str(r.get('id')) != str(score_id)]
            removed = len(remaining) != len(records)
            if removed:
                self._write(remaining)

        if removed:
            logger.info(f"Deleted score {score_id} from {self.path}")
        else:
            logger.debug(f"Score {score_id} not found in {self.path}, nothing to delete")
        return removed

    def __len__(self) -> int:
        return len(self.list_records())
