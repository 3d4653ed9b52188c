"""Saved score persistence, HTTP client and export."""
from .client import SaveOutcome, ScoreStorageClient
from .export import export_score_csv, export_score_json, saved_scores_to_dataframe, scores_to_dataframe
from .score_store import InvalidScoreRecordError, JsonScoreStore, SavedScore, ScoreStorageError

__all__ = [
    'SaveOutcome',
    'ScoreStorageClient',
    'export_score_csv',
    'export_score_json',
    'saved_scores_to_dataframe',
    'scores_to_dataframe',
    'InvalidScoreRecordError',
    'JsonScoreStore',
    'SavedScore',
    'ScoreStorageError',
]
