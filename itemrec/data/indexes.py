"""Loading of the users/items index files and the seen-ratings set"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import MappingProxyType
from ..config import JobConfig
from ..errors import DuplicateIndexError, RecordParseError
from .reader import iter_lines, parse_double, parse_int
from .types import IndexTables, ItemIndexEntry, ItemsMap, SeenSet, UsersMap

logger = logging.getLogger(__name__)

# Written by the index generator when an item has no end time
NO_END_TIME = "PIO_NONE"

ITEM_TYPES_DELIMITER = ","


def load_users_index(path: str | Path, reject_duplicates: bool = False) -> UsersMap:
    """
    Load usersIndex.tsv into a read-only map.

    Each line is `uindex<TAB>uid`; any further fields are ignored.

    Args:
        path: Path to the users index file
        reject_duplicates: Raise on a repeated index instead of keeping the
                           last occurrence

    Returns:
        Mapping of user index → external user id

    Raises:
        RecordParseError: A line has fewer than two fields or a non-integer index

    Example:
        >>> users = load_users_index("data/usersIndex.tsv")
        >>> users[1]
        'u1'
    """
    users: dict[int, str] = {}
    duplicates = 0

    for line_number, line in _read_lines(path):
        fields = line.split("\t")
        try:
            index, uid = parse_int(fields[0]), fields[1]
        except (IndexError, ValueError) as e:
            raise RecordParseError(
                f"Cannot get user index and uid. {e}",
                source=str(path), line_number=line_number, line=line,
            ) from e

        if index in users:
            duplicates += 1
            if reject_duplicates:
                raise DuplicateIndexError(
                    f"Duplicate user index {index}",
                    source=str(path), line_number=line_number, line=line,
                )
        users[index] = uid

    _warn_duplicates(path, duplicates)
    logger.info("Loaded %d users from %s", len(users), path)
    return MappingProxyType(users)


def load_items_index(path: str | Path, reject_duplicates: bool = False) -> ItemsMap:
    """
    Load itemsIndex.tsv into a read-only map.

    Each line is `iindex<TAB>iid<TAB>itypes<TAB>starttime<TAB>endtime` where
    itypes is comma-separated and endtime may be `PIO_NONE`.

    Args:
        path: Path to the items index file
        reject_duplicates: Raise on a repeated index instead of keeping the
                           last occurrence

    Returns:
        Mapping of item index → ItemIndexEntry

    Raises:
        RecordParseError: A line has fewer than five fields or a non-integer
                          index/time field
    """
    items: dict[int, ItemIndexEntry] = {}
    duplicates = 0

    for line_number, line in _read_lines(path):
        try:
            entry = _parse_item_fields(line.split("\t"))
        except (IndexError, ValueError) as e:
            raise RecordParseError(
                f"Cannot get item info. {e}",
                source=str(path), line_number=line_number, line=line,
            ) from e

        if entry.index in items:
            duplicates += 1
            if reject_duplicates:
                raise DuplicateIndexError(
                    f"Duplicate item index {entry.index}",
                    source=str(path), line_number=line_number, line=line,
                )
        items[entry.index] = entry

    _warn_duplicates(path, duplicates)
    logger.info("Loaded %d items from %s", len(items), path)
    return MappingProxyType(items)


def load_seen_set(path: str | Path) -> SeenSet:
    """
    Load ratings.csv into the set of (uindex, iindex) pairs already seen.

    Each line is `uindex,iindex,rating`. The rating must be numeric but is
    not kept.

    Raises:
        RecordParseError: A line has fewer than three fields or a field
                          cannot be converted
    """
    seen: set[tuple[int, int]] = set()

    for line_number, line in _read_lines(path):
        fields = line.split(",")
        try:
            uindex, iindex = parse_int(fields[0]), parse_int(fields[1])
            parse_double(fields[2])
        except (IndexError, ValueError) as e:
            raise RecordParseError(
                f"Cannot get user and item index from this line. {e}",
                source=str(path), line_number=line_number, line=line,
            ) from e
        seen.add((uindex, iindex))

    logger.info("Loaded %d seen (user, item) pairs from %s", len(seen), path)
    return frozenset(seen)


def load_index_tables(config: JobConfig) -> IndexTables:
    """
    Build every lookup structure needed before predictions are streamed.

    The index files (and ratings file, when unseen-only filtering is on)
    share nothing, so they are read concurrently. The first failure is
    re-raised here.

    Args:
        config: Job configuration

    Returns:
        IndexTables with users, items and the seen-set (None if not needed)
    """
    strict = config.reject_duplicate_indices

    with ThreadPoolExecutor(max_workers=3, thread_name_prefix="index-loader") as pool:
        users_future = pool.submit(load_users_index, config.users_index_path, strict)
        items_future = pool.submit(load_items_index, config.items_index_path, strict)
        seen_future = (
            pool.submit(load_seen_set, config.ratings_path)
            if config.unseen_only else None
        )

        users = users_future.result()
        items = items_future.result()
        seen = seen_future.result() if seen_future is not None else None

    return IndexTables(users=users, items=items, seen=seen)


# ============================================================================
# Helpers
# ============================================================================


def _read_lines(path: str | Path):
    """Yield (line_number, line) for the non-blank lines of an index file."""
    for line_number, line in iter_lines(path):
        if line:
            yield line_number, line


def _parse_item_fields(fields: list[str]) -> ItemIndexEntry:
    index = parse_int(fields[0])
    item_id = fields[1]
    item_types = tuple(t for t in fields[2].split(ITEM_TYPES_DELIMITER) if t)
    start_time = parse_int(fields[3])
    end_time = None if fields[4] == NO_END_TIME else parse_int(fields[4])

    return ItemIndexEntry(
        index=index,
        item_id=item_id,
        item_types=item_types,
        start_time=start_time,
        end_time=end_time,
    )


def _warn_duplicates(path: str | Path, duplicates: int):
    if duplicates:
        logger.warning(
            "%s contains %d duplicate index line(s); the last occurrence was kept",
            path, duplicates,
        )
