"""End-to-end self-test against a throwaway local repository.

Requires ``svn`` and ``svnadmin``.  The test:

1. Builds a small source tree (including a file name with an ``@``) and
   creates an empty repository under ``<base>/self_test``.
2. Publishes the tree to a not-yet-existing folder in that repository,
   which must take the import branch.
3. Deletes some files and a directory from the source tree and publishes
   again, which must take the checkout branch and delete them remotely.
4. Removes ``<base>/self_test``.

Each publish is verified with ``svn list --recursive``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import CommitRequest
from .core.client import SvnClient
from .errors import SelfTestError
from .file_handler import remove_tree
from .pipeline.engine import DiffCommitPipeline
from .pipeline.models import CommitReport

logger = logging.getLogger(__name__)

SELF_TEST_DIR = "self_test"


@dataclass
class FixtureEntry:
    path: str
    is_dir: bool = False
    content: str = ""


FIXTURE: list[FixtureEntry] = [
    FixtureEntry("1.txt", content="data1"),
    FixtureEntry("2.txt", content="data2"),
    FixtureEntry("3@1080.txt", content="at signs can be sneaky with svn"),
    FixtureEntry("subdir_a", is_dir=True),
    FixtureEntry("subdir_a/3.txt", content="data3"),
    FixtureEntry("subdir_b", is_dir=True),
    FixtureEntry("subdir_b/4.txt", content="data4"),
    FixtureEntry("subdir_c", is_dir=True),
]

REMOVED_BEFORE_SECOND_RUN = ["1.txt", "3@1080.txt", "subdir_a/3.txt", "subdir_b"]

EXPECTED_AFTER_IMPORT = frozenset(
    e.path + "/" if e.is_dir else e.path for e in FIXTURE
)
EXPECTED_AFTER_CHECKOUT = frozenset({"2.txt", "subdir_a/", "subdir_c/"})


@dataclass
class SelfTestResult:
    first: CommitReport
    second: CommitReport


def create_fixture_tree(root: Path) -> None:
    root.mkdir()
    for entry in FIXTURE:
        path = root / entry.path
        if entry.is_dir:
            path.mkdir()
        else:
            path.write_text(entry.content, encoding="utf-8")


def remove_fixture_entries(root: Path) -> None:
    for rel in REMOVED_BEFORE_SECOND_RUN:
        remove_tree(root / rel)


def _check(
    label: str,
    report: CommitReport,
    mode: str,
    listed: list[str],
    expected: frozenset[str],
) -> None:
    failure = report.failure
    if failure is not None:
        raise SelfTestError(
            f"{label}: step {failure.step.value} failed: {failure.error}"
        )
    if report.mode != mode:
        raise SelfTestError(
            f"{label}: expected {mode} branch, pipeline took {report.mode}"
        )
    actual = set(listed)
    if actual != expected:
        raise SelfTestError(
            f"{label}: repository mismatch; "
            f"missing {sorted(expected - actual)}, "
            f"unexpected {sorted(actual - expected)}"
        )
    logger.info("%s: ok (%d paths)", label, len(actual))


def run_self_test(
    client: SvnClient,
    base_dir: Path,
    message: str = "svndc self-test",
) -> SelfTestResult:
    """Run the two-publish self-test under *base_dir*.

    Args:
        client: svn client (needs a working ``svnadmin`` too).
        base_dir: Directory in which ``self_test/`` is created; it must
            not already contain one.
        message: Commit message for both publishes.

    Returns:
        Reports of both pipeline runs.

    Raises:
        SelfTestError: A run failed or left the repository in an
            unexpected state.
        FileExistsError: ``self_test/`` already exists.
    """
    test_path = base_dir.resolve() / SELF_TEST_DIR
    test_path.mkdir()
    try:
        source = test_path / "src"
        create_fixture_tree(source)

        repos = test_path / "repos"
        client.create_repository(repos)
        # A folder that does not exist yet, so the first run must import.
        url = (repos / "new folder").as_uri()
        logger.debug("Self-test repository URL: %s", url)

        request = CommitRequest(
            source_path=str(source),
            repository=url,
            working_copy=str(test_path / "wc"),
            message=message,
        )
        pipeline = DiffCommitPipeline(client)

        first = pipeline.run(request)
        _check(
            "first run",
            first,
            "import",
            client.list_paths(url) if first.success else [],
            EXPECTED_AFTER_IMPORT,
        )

        remove_fixture_entries(source)

        second = pipeline.run(request)
        _check(
            "second run",
            second,
            "checkout",
            client.list_paths(url) if second.success else [],
            EXPECTED_AFTER_CHECKOUT,
        )
    finally:
        try:
            remove_tree(test_path)
        except OSError as exc:
            logger.error("Could not remove %s: %s", test_path, exc)

    return SelfTestResult(first=first, second=second)
