"""Command-line entry point for the model constructor"""

import argparse
import logging
import os
import sys

from .config import JobConfig
from .constructor import run_model_construction
from .errors import ModelConstructionError

logger = logging.getLogger("itemrec")

# Exit status per fatal error kind
EXIT_CODES = {
    "parse": 3,
    "assertion": 4,
    "lookup": 5,
}
EXIT_MISSING_INPUT = 1


def str2bool(value: str) -> bool:
    """Parse "true"/"false" (any case) the way the job arguments are written."""
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description="Construct item recommendation model data from prediction output"
    )

    # Required arguments
    parser.add_argument("--inputDir", dest="input_dir", type=str, required=True,
                        help="Directory with usersIndex.tsv, itemsIndex.tsv, "
                             "ratings.csv and predicted.tsv")
    parser.add_argument("--appid", dest="app_id", type=int, required=True,
                        help="App id the recommendations are generated for")
    parser.add_argument("--algoid", dest="algo_id", type=int, required=True,
                        help="Algorithm id that produced the predictions")
    parser.add_argument("--modelSet", dest="model_set", type=str2bool, required=True,
                        help="Model set flag (true/false)")

    # Filtering arguments
    parser.add_argument("--unseenOnly", dest="unseen_only", type=str2bool, default=False,
                        help="Only recommend items the user has not rated (default: false)")
    parser.add_argument("--numRecommendations", dest="num_recommendations", type=int,
                        default=None,
                        help="Maximum number of recommendations per user (default: all)")

    # Optional arguments
    parser.add_argument("--evalid", dest="eval_id", type=int, default=None,
                        help="Offline evaluation id. Writes training model data "
                             "and uses evalid as appid")
    parser.add_argument("--booleanData", dest="boolean_data", type=str2bool, default=False,
                        help="Upstream scoring used boolean data (default: false)")
    parser.add_argument("--implicitFeedback", dest="implicit_feedback", type=str2bool,
                        default=False,
                        help="Upstream scoring used implicit feedback (default: false)")

    # Output / execution arguments
    parser.add_argument("--outputDir", dest="output_dir", type=str, default=None,
                        help="Directory for the model data file (default: inputDir)")
    parser.add_argument("--workers", type=int, default=1,
                        help="Threads for processing prediction lines (default: 1)")
    parser.add_argument("--rejectDuplicateIndices", dest="reject_duplicate_indices",
                        action="store_true",
                        help="Fail on duplicate indices instead of keeping the last one")
    parser.add_argument("--logLevel", dest="log_level", type=str,
                        default=os.getenv("LOG_LEVEL", "INFO"),
                        help="Logging level (default: $LOG_LEVEL or INFO)")
    parser.add_argument("--quiet", action="store_true",
                        help="Disable the progress bar")

    args = parser.parse_args(argv)

    if args.num_recommendations is not None and args.num_recommendations < 0:
        parser.error("--numRecommendations must be >= 0")
    if args.workers < 1:
        parser.error("--workers must be >= 1")

    return args


def config_from_args(args: argparse.Namespace) -> JobConfig:
    return JobConfig(
        input_dir=args.input_dir,
        app_id=args.app_id,
        algo_id=args.algo_id,
        eval_id=args.eval_id,
        model_set=args.model_set,
        unseen_only=args.unseen_only,
        num_recommendations=args.num_recommendations,
        boolean_data=args.boolean_data,
        implicit_feedback=args.implicit_feedback,
        output_dir=args.output_dir,
        workers=args.workers,
        reject_duplicate_indices=args.reject_duplicate_indices,
        verbose=not args.quiet,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger.info("Running model constructor ...")
    logger.info(",".join(sys.argv[1:] if argv is None else argv))

    config = config_from_args(args)

    try:
        summary = run_model_construction(config)
    except ModelConstructionError as e:
        logger.error("Model construction aborted [%s error]: %s", e.kind, e)
        return EXIT_CODES.get(e.kind, 1)
    except FileNotFoundError as e:
        logger.error("Model construction aborted, missing input: %s", e)
        return EXIT_MISSING_INPUT

    print("\n" + "=" * 50)
    print("MODEL CONSTRUCTION RESULTS")
    print("=" * 50)
    for name, value in summary._asdict().items():
        print(f"{name:15s}: {value}")
    print("=" * 50)
    print(f"\nModel data saved to {config.store_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
