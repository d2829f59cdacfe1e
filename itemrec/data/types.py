"""Type definitions for data structures used throughout itemrec."""

from collections.abc import Mapping
from typing import NamedTuple

# ============================================================================
# Type Aliases
# ============================================================================

# Internal index → external user id
UsersMap = Mapping[int, str]

# (item index, score) pair as it comes out of the prediction file
ScoredItem = tuple[int, float]

# (user index, item index) pairs the user has already rated
SeenSet = frozenset[tuple[int, int]]

# ============================================================================
# Index Types
# ============================================================================


class ItemIndexEntry(NamedTuple):
    """One row of itemsIndex.tsv.

    Presence of an entry in the items map is what makes an item valid.
    """
    index: int
    item_id: str                  # External item id
    item_types: tuple[str, ...]
    start_time: int
    end_time: int | None          # None when the item never expires


ItemsMap = Mapping[int, ItemIndexEntry]


class IndexTables(NamedTuple):
    """Lookup structures built before predictions are streamed.

    Read-only once built, so they can be shared by any number of workers.
    """
    users: UsersMap
    items: ItemsMap
    seen: SeenSet | None          # None when unseen-only filtering is off


# ============================================================================
# Prediction Types
# ============================================================================


class PredictionRecord(NamedTuple):
    """One parsed line of predicted.tsv.

    The order of `items` mirrors the source string, which has no meaning.
    """
    user_index: int
    items: list[ScoredItem]
    line_number: int | None = None
    line: str | None = None


# ============================================================================
# Output Types
# ============================================================================


class RankedItem(NamedTuple):
    item_id: str
    score: float
    item_types: tuple[str, ...]


class RankedRecommendation(NamedTuple):
    """Final recommendation list for one user, as handed to the store."""
    user_id: str
    items: tuple[RankedItem, ...]
    app_id: int
    algo_id: int
    model_set: bool

    def to_document(self) -> dict:
        """Serialize to the item-rec model data document layout."""
        return {
            "uid": self.user_id,
            "iids": [item.item_id for item in self.items],
            "scores": [item.score for item in self.items],
            "itypes": [list(item.item_types) for item in self.items],
            "appid": self.app_id,
            "algoid": self.algo_id,
            "modelset": self.model_set,
        }


class ConstructionSummary(NamedTuple):
    """Statistics of a finished run."""
    num_records: int       # Records written to the store
    num_candidates: int    # Scored items read from the prediction file
    num_recommended: int   # Items that survived filtering and truncation
    num_empty: int         # Records with an empty item list
