"""Input file handling for itemrec"""

from .indexes import (
    load_users_index,
    load_items_index,
    load_seen_set,
    load_index_tables,
)
from .predictions import (
    parse_predicted_scores,
    parse_prediction_line,
    iter_prediction_lines,
)
from .types import (
    ItemIndexEntry,
    IndexTables,
    PredictionRecord,
    RankedItem,
    RankedRecommendation,
    ConstructionSummary,
)

__all__ = [
    # Indexes
    "load_users_index",
    "load_items_index",
    "load_seen_set",
    "load_index_tables",
    # Predictions
    "parse_predicted_scores",
    "parse_prediction_line",
    "iter_prediction_lines",
    # Types
    "ItemIndexEntry",
    "IndexTables",
    "PredictionRecord",
    "RankedItem",
    "RankedRecommendation",
    "ConstructionSummary",
]
