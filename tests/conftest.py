"""Shared fixtures: write the job's input files into a temporary directory"""

import json

import pytest

from itemrec import InMemoryStore, JobConfig

USERS_INDEX = "1\tu1\n2\tu2\n"
ITEMS_INDEX = (
    "10\ti10\ttypeA\t0\t100\n"
    "20\ti20\ttypeB\t0\t100\n"
    "30\ti30\ttypeA,typeC\t0\tPIO_NONE\n"
)


def write_inputs(
    directory,
    predicted: str,
    users: str = USERS_INDEX,
    items: str = ITEMS_INDEX,
    ratings: str | None = None,
):
    """Write the four input files; ratings.csv only if given."""
    (directory / "usersIndex.tsv").write_text(users, encoding="utf-8")
    (directory / "itemsIndex.tsv").write_text(items, encoding="utf-8")
    (directory / "predicted.tsv").write_text(predicted, encoding="utf-8")
    if ratings is not None:
        (directory / "ratings.csv").write_text(ratings, encoding="utf-8")
    return directory


@pytest.fixture
def input_dir(tmp_path):
    directory = tmp_path / "input"
    directory.mkdir()
    return directory


@pytest.fixture
def inputs(input_dir):
    """Write input files into input_dir: inputs(predicted, ratings=...)."""
    def _write(predicted: str, **kwargs):
        return write_inputs(input_dir, predicted, **kwargs)

    return _write


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def make_config(input_dir):
    def _make(**overrides):
        params = dict(input_dir=input_dir, app_id=7, algo_id=3, verbose=False)
        params.update(overrides)
        return JobConfig(**params)

    return _make


def load_documents(path) -> list[dict]:
    """Read back the documents written by a JsonLinesStore."""
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


@pytest.fixture
def read_documents():
    return load_documents
