"""Job configuration for the model constructor"""

from dataclasses import dataclass
from pathlib import Path

# ============================================================================
# Input / output file names
# ============================================================================

USERS_INDEX_FILE = "usersIndex.tsv"      # uindex  uid
ITEMS_INDEX_FILE = "itemsIndex.tsv"      # iindex  iid  itypes  starttime  endtime
RATINGS_FILE = "ratings.csv"             # uindex,iindex,rating
PREDICTED_FILE = "predicted.tsv"         # uindex  [iindex:score,...]

ITEMREC_SCORES_FILE = "itemrec_scores.jsonl"
TRAINING_ITEMREC_SCORES_FILE = "training_itemrec_scores.jsonl"


@dataclass(frozen=True)
class JobConfig:
    """
    Arguments of one model construction run.

    Built once (usually from the command line) and passed explicitly to every
    component, so each piece can be exercised on its own with fabricated
    inputs.

    Args:
        input_dir: Directory holding the index, ratings and prediction files
        app_id: Application the recommendations are generated for
        algo_id: Algorithm that produced the predictions
        eval_id: If set, run in offline evaluation mode. Records go to the
                 training store and are tagged with eval_id instead of app_id.
        model_set: Which of the two model sets the records belong to
        unseen_only: Only recommend items the user has not rated yet
        num_recommendations: Maximum items per user (None = keep all)
        boolean_data: Upstream scoring ran on boolean data
        implicit_feedback: Upstream scoring ran on implicit feedback
        output_dir: Directory of the file-backed store (default: input_dir)
        workers: Threads used for the per-line transform (1 = sequential)
        reject_duplicate_indices: Fail on duplicate keys in the index files
                                  instead of keeping the last occurrence
        verbose: Show a progress bar while streaming predictions
    """
    input_dir: Path
    app_id: int
    algo_id: int
    eval_id: int | None = None
    model_set: bool = False
    unseen_only: bool = False
    num_recommendations: int | None = None
    boolean_data: bool = False
    implicit_feedback: bool = False
    output_dir: Path | None = None
    workers: int = 1
    reject_duplicate_indices: bool = False
    verbose: bool = True

    def __post_init__(self):
        # Accept plain strings for paths
        object.__setattr__(self, "input_dir", Path(self.input_dir))
        if self.output_dir is not None:
            object.__setattr__(self, "output_dir", Path(self.output_dir))

        if self.num_recommendations is not None and self.num_recommendations < 0:
            raise ValueError(
                f"num_recommendations must be >= 0, got {self.num_recommendations}"
            )
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    # ------------------------------------------------------------------------
    # Derived settings
    # ------------------------------------------------------------------------

    @property
    def offline_eval(self) -> bool:
        """True when writing training model data for an offline evaluation."""
        return self.eval_id is not None

    @property
    def effective_app_id(self) -> int:
        """App id written to the records (eval_id in offline evaluation)."""
        return self.eval_id if self.eval_id is not None else self.app_id

    @property
    def implicit_preference(self) -> bool:
        return self.boolean_data or self.implicit_feedback

    @property
    def users_index_path(self) -> Path:
        return self.input_dir / USERS_INDEX_FILE

    @property
    def items_index_path(self) -> Path:
        return self.input_dir / ITEMS_INDEX_FILE

    @property
    def ratings_path(self) -> Path:
        return self.input_dir / RATINGS_FILE

    @property
    def predicted_path(self) -> Path:
        return self.input_dir / PREDICTED_FILE

    @property
    def store_path(self) -> Path:
        """File the JSON-lines store writes to for this run."""
        directory = self.output_dir if self.output_dir is not None else self.input_dir
        name = TRAINING_ITEMREC_SCORES_FILE if self.offline_eval else ITEMREC_SCORES_FILE
        return directory / name
