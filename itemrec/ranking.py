"""Candidate filtering and top-N ranking"""

import numpy as np

from .data.types import ItemsMap, PredictionRecord, ScoredItem, SeenSet


# =============================================================================
# Filters
# =============================================================================

def unseen_item_filter(
    enable: bool,
    uindex: int,
    iindex: int,
    seen: SeenSet | None,
) -> bool:
    """
    Keep items the user has not rated yet.

    Args:
        enable: Whether unseen-only filtering is on. When off the seen-set is
                not looked at and every item passes.
        uindex: User index
        iindex: Item index
        seen: Set of (uindex, iindex) pairs already rated

    Returns:
        True if the item may be recommended
    """
    if not enable:
        return True
    return (uindex, iindex) not in seen


def valid_item_filter(enable: bool, iindex: int, items: ItemsMap) -> bool:
    """Keep items that exist in the items index."""
    if not enable:
        return True
    return iindex in items


# =============================================================================
# Ranking
# =============================================================================

def rank_candidates(
    record: PredictionRecord,
    items: ItemsMap,
    seen: SeenSet | None = None,
    unseen_only: bool = False,
    num_recommendations: int | None = None,
) -> list[ScoredItem]:
    """
    Filter a user's predicted items and rank them by score.

    Candidates must pass both the unseen and validity filters. Survivors are
    sorted by score, highest first. The sort is stable, so items with equal
    scores keep the order they had in the prediction line.

    Args:
        record: Parsed prediction line
        items: Items index (membership = validity)
        seen: Seen-set, only consulted when unseen_only is True
        unseen_only: Drop items the user already rated
        num_recommendations: Keep at most this many items (None = keep all)

    Returns:
        Ranked list of (item index, score)

    Raises:
        ValueError: unseen_only is True but seen is None

    Example:
        >>> record = PredictionRecord(user_index=1, items=[(10, 3.0), (20, 5.0)])
        >>> rank_candidates(record, items, num_recommendations=1)
        [(20, 5.0)]
    """
    if unseen_only and seen is None:
        raise ValueError("unseen_only is set but no seen-set was given")

    uindex = record.user_index
    candidates = [
        (iindex, score)
        for iindex, score in record.items
        if unseen_item_filter(unseen_only, uindex, iindex, seen)
        and valid_item_filter(True, iindex, items)
    ]

    if not candidates:
        return []

    scores = np.fromiter(
        (score for _, score in candidates), dtype=np.float64, count=len(candidates)
    )
    order = np.argsort(-scores, kind="stable")

    if num_recommendations is not None:
        order = order[:num_recommendations]

    return [candidates[i] for i in order]
