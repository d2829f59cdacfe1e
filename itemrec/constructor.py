"""Model constructor: turns prediction output into per-user recommendation records"""

import logging
from concurrent.futures import ThreadPoolExecutor
from itertools import islice
from typing import Iterable, Iterator

from tqdm.auto import tqdm

from .config import JobConfig
from .data.indexes import load_index_tables
from .data.predictions import iter_prediction_lines, parse_prediction_line
from .data.types import (
    ConstructionSummary,
    IndexTables,
    PredictionRecord,
    RankedItem,
    RankedRecommendation,
    ScoredItem,
)
from .errors import IndexLookupError
from .ranking import rank_candidates
from .storage import JsonLinesStore, ModelDataStore

logger = logging.getLogger(__name__)

# Lines handed to the thread pool at a time when workers > 1
DEFAULT_BATCH_SIZE = 1024


def build_recommendation(
    uindex: int,
    ranked: list[ScoredItem],
    tables: IndexTables,
    config: JobConfig,
    line_number: int | None = None,
    line: str | None = None,
) -> RankedRecommendation:
    """
    Translate a ranked list of internal indices into a model data record.

    Args:
        uindex: User index of the prediction line
        ranked: Output of rank_candidates (every item is in the items index)
        tables: Index tables
        config: Job configuration (app/algo ids, model set)
        line_number: Position of the prediction line, for error reporting
        line: Prediction line content, for error reporting

    Returns:
        RankedRecommendation with external ids

    Raises:
        IndexLookupError: uindex is not in the users index
    """
    try:
        uid = tables.users[uindex]
    except KeyError as e:
        raise IndexLookupError(
            f"Cannot get uid for user index {uindex}",
            source=str(config.predicted_path), line_number=line_number, line=line,
        ) from e

    items = tuple(
        RankedItem(
            item_id=tables.items[iindex].item_id,
            score=score,
            item_types=tables.items[iindex].item_types,
        )
        for iindex, score in ranked
    )

    return RankedRecommendation(
        user_id=uid,
        items=items,
        app_id=config.effective_app_id,
        algo_id=config.algo_id,
        model_set=config.model_set,
    )


class ModelConstructor:
    """
    Streams predicted.tsv through parse → filter → rank → map → store.

    Index tables are built up front (see load_index_tables) and only read
    afterwards, so the per-line transform can run on several threads. Records
    always reach the store in file order, from the calling thread.

    Examples:
        >>> config = JobConfig(input_dir="data/", app_id=1, algo_id=2)
        >>> store = InMemoryStore()
        >>> constructor = ModelConstructor.from_config(config, store)
        >>> summary = constructor.run()
        >>> summary.num_records
        3
    """

    def __init__(
        self,
        config: JobConfig,
        store: ModelDataStore,
        tables: IndexTables,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        """
        Args:
            config: Job configuration
            store: Destination for the records
            tables: Prebuilt index tables
            batch_size: Lines per thread pool batch (only used when workers > 1)
        """
        if config.unseen_only and tables.seen is None:
            raise ValueError("unseen_only is set but no seen-set was loaded")

        self.config = config
        self.store = store
        self.tables = tables
        self.batch_size = batch_size
        self._source = str(config.predicted_path)

    @classmethod
    def from_config(cls, config: JobConfig, store: ModelDataStore) -> "ModelConstructor":
        """Load the index tables named by `config` and build a constructor."""
        logger.info("Loading index tables from %s", config.input_dir)
        tables = load_index_tables(config)
        return cls(config=config, store=store, tables=tables)

    def process_line(self, line_number: int, line: str) -> RankedRecommendation | None:
        """
        Turn one prediction line into a record.

        Args:
            line_number: 1-based position in the prediction file
            line: Line content without the line ending

        Returns:
            The record, or None for a blank line
        """
        processed = self._process(line_number, line)
        return processed[1] if processed is not None else None

    def _process(
        self, line_number: int, line: str
    ) -> tuple[PredictionRecord, RankedRecommendation] | None:
        if not line:
            return None

        record = parse_prediction_line(line, line_number=line_number, source=self._source)
        ranked = rank_candidates(
            record,
            self.tables.items,
            seen=self.tables.seen,
            unseen_only=self.config.unseen_only,
            num_recommendations=self.config.num_recommendations,
        )
        logger.debug("uindex %d: %s", record.user_index, ranked)

        recommendation = build_recommendation(
            record.user_index,
            ranked,
            self.tables,
            self.config,
            line_number=line_number,
            line=line,
        )
        return record, recommendation

    def run(self) -> ConstructionSummary:
        """
        Process the whole prediction file and write every record to the store.

        Stops at the first fatal error; records already written belong to an
        aborted run and must not be used.

        Returns:
            ConstructionSummary of the run
        """
        config = self.config
        logger.info(
            "Constructing model data: appid=%d algoid=%d modelset=%s unseen_only=%s "
            "num_recommendations=%s implicit_preference=%s offline_eval=%s",
            config.effective_app_id, config.algo_id, config.model_set,
            config.unseen_only, config.num_recommendations,
            config.implicit_preference, config.offline_eval,
        )

        num_records = 0
        num_candidates = 0
        num_recommended = 0
        num_empty = 0

        lines = iter_prediction_lines(config.predicted_path)
        with tqdm(lines, desc="Constructing", unit="line", disable=not config.verbose) as pbar:
            for processed in self._transform(pbar):
                if processed is None:
                    continue
                record, recommendation = processed
                self.store.insert(recommendation)

                num_records += 1
                num_candidates += len(record.items)
                num_recommended += len(recommendation.items)
                if not recommendation.items:
                    num_empty += 1

        summary = ConstructionSummary(
            num_records=num_records,
            num_candidates=num_candidates,
            num_recommended=num_recommended,
            num_empty=num_empty,
        )
        logger.info(
            "Model data constructed: %d records, %d/%d candidates kept, %d empty",
            summary.num_records, summary.num_recommended,
            summary.num_candidates, summary.num_empty,
        )
        return summary

    def _transform(
        self, lines: Iterable[tuple[int, str]]
    ) -> Iterator[tuple[PredictionRecord, RankedRecommendation] | None]:
        """Process lines in file order, on a thread pool if configured."""
        if self.config.workers == 1:
            for line_number, line in lines:
                yield self._process(line_number, line)
            return

        lines = iter(lines)
        with ThreadPoolExecutor(
            max_workers=self.config.workers, thread_name_prefix="constructor"
        ) as pool:
            while True:
                batch = list(islice(lines, self.batch_size))
                if not batch:
                    break
                # map re-raises the first failing line when its result is reached
                yield from pool.map(lambda args: self._process(*args), batch)


def run_model_construction(
    config: JobConfig,
    store: ModelDataStore | None = None,
) -> ConstructionSummary:
    """
    Run a complete model construction job.

    Args:
        config: Job configuration
        store: Destination store. If None, a JsonLinesStore is opened at
               config.store_path (the training file in offline evaluation).

    Returns:
        ConstructionSummary of the run
    """
    if store is not None:
        return ModelConstructor.from_config(config, store).run()

    with JsonLinesStore(config.store_path) as file_store:
        return ModelConstructor.from_config(config, file_store).run()
