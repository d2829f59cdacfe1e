"""Item recommendation model constructor"""

from .config import JobConfig
from .constructor import ModelConstructor, build_recommendation, run_model_construction
from .errors import (
    ModelConstructionError,
    RecordParseError,
    DuplicateIndexError,
    ScoreFormatError,
    IndexLookupError,
)
from .ranking import rank_candidates, unseen_item_filter, valid_item_filter
from .storage import ModelDataStore, InMemoryStore, JsonLinesStore

__all__ = [
    "JobConfig",
    # Constructor
    "ModelConstructor",
    "build_recommendation",
    "run_model_construction",
    # Errors
    "ModelConstructionError",
    "RecordParseError",
    "DuplicateIndexError",
    "ScoreFormatError",
    "IndexLookupError",
    # Ranking
    "rank_candidates",
    "unseen_item_filter",
    "valid_item_filter",
    # Storage
    "ModelDataStore",
    "InMemoryStore",
    "JsonLinesStore",
]
