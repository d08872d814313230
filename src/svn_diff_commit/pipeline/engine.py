"""Reconciliation pipeline that turns a source tree into one svn commit.

The ``DiffCommitPipeline``:

1. Validates the request and marshals the global svn options.
2. Probes the repository URL with ``svn list``.
3. If the probe fails, imports the source tree directly (first publish).
4. Otherwise checks out a working copy, empties it (keeping ``.svn``),
   mirrors the source tree into it, schedules every top-level entry for
   addition, schedules every path reported missing for deletion, and
   commits.
5. Optionally deletes the working copy after the commit.

Steps run strictly in order and the first failure ends the run.  Each
step yields a ``StepResult``; ``run()`` returns them all in a
``CommitReport`` rather than raising, so callers can see exactly where a
run stopped and what state it left behind (a half-mirrored working copy,
for instance).  Nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from functools import partial
from pathlib import Path, PurePath

from svn_diff_commit.config import CommitRequest, GlobalClientOptions
from svn_diff_commit.core.client import SvnClient
from svn_diff_commit.core.status import parse_missing
from svn_diff_commit.errors import IOFailureError, SvnDiffCommitError
from svn_diff_commit.file_handler import (
    clean_working_copy_root,
    mirror_tree,
    remove_tree,
    top_level_entries,
)
from svn_diff_commit.flags import ArgMarshaller
from svn_diff_commit.pipeline.models import (
    CommitReport,
    PipelineStep,
    StepResult,
)
from svn_diff_commit.validators import validate_commit_request

logger = logging.getLogger(__name__)


def outermost_paths(paths: Iterable[str]) -> list[str]:
    """Drop paths that sit below another path in the same collection.

    ``svn delete`` on a directory already schedules its children, so only
    the outermost missing paths need to be passed.  Order is preserved.
    """
    unique = list(dict.fromkeys(paths))
    pure = {p: PurePath(p) for p in unique}
    members = set(pure.values())
    return [
        p
        for p in unique
        if not any(parent in members for parent in pure[p].parents)
    ]


class DiffCommitPipeline:
    """Publish a source directory to an svn repository as one changeset.

    Args:
        client: svn client used for every repository operation.
        marshaller: Serialises ``GlobalClientOptions`` into svn arguments.
    """

    def __init__(
        self,
        client: SvnClient,
        marshaller: ArgMarshaller | None = None,
    ) -> None:
        self.client = client
        self.marshaller = marshaller or ArgMarshaller()

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def run(
        self,
        request: CommitRequest,
        options: GlobalClientOptions | None = None,
    ) -> CommitReport:
        """Execute one diff-commit run.

        Args:
            request: What to publish and where.
            options: svn global options appended to every invocation that
                contacts the repository.

        Returns:
            A ``CommitReport``; ``report.success`` is False if any step
            failed, and ``report.failure`` names it.
        """
        started_at = datetime.now(timezone.utc).isoformat()
        results: list[StepResult] = []

        def finish(mode: str | None = None) -> CommitReport:
            return CommitReport(
                repository=request.repository,
                working_copy=request.working_copy,
                mode=mode,
                results=results,
                started_at=started_at,
                completed_at=datetime.now(timezone.utc).isoformat(),
            )

        # Validation happens before any external invocation
        try:
            validate_commit_request(request)
            extra = self.marshaller.to_args(
                options or GlobalClientOptions()
            )
        except SvnDiffCommitError as exc:
            results.append(self._failed(PipelineStep.VALIDATE, exc))
            return finish()
        results.append(
            StepResult(step=PipelineStep.VALIDATE, success=True)
        )

        # Probe: the only branch condition
        try:
            reachable = self.client.can_list(request.repository, extra)
        except SvnDiffCommitError as exc:
            results.append(self._failed(PipelineStep.PROBE, exc))
            return finish()
        results.append(
            StepResult(
                step=PipelineStep.PROBE,
                success=True,
                detail="reachable" if reachable else "not reachable",
            )
        )

        if not reachable:
            logger.info(
                "Could not list %s, trying svn import.", request.repository
            )
            results.append(
                self._attempt(
                    PipelineStep.IMPORT, self._import, request, extra
                )
            )
            return finish("import")

        logger.info(
            "Can list %s, proceeding with checkout.", request.repository
        )
        source = Path(request.source_path)
        working_copy = Path(request.working_copy)

        steps: list[tuple[PipelineStep, Callable[[], StepResult]]] = [
            (
                PipelineStep.CHECKOUT,
                partial(self._checkout, request.repository, working_copy, extra),
            ),
            (PipelineStep.CLEAN, partial(self._clean, working_copy)),
            (PipelineStep.MIRROR, partial(self._mirror, source, working_copy)),
            (PipelineStep.ADD, partial(self._add, working_copy)),
            (PipelineStep.DELETE, partial(self._delete, working_copy)),
            (
                PipelineStep.COMMIT,
                partial(self._commit, working_copy, request.message, extra),
            ),
        ]
        if request.delete_working_copy:
            steps.append(
                (PipelineStep.CLEANUP, partial(self._cleanup, working_copy))
            )

        for step, action in steps:
            result = self._attempt(step, action)
            results.append(result)
            if not result.success:
                break

        return finish("checkout")

    # ------------------------------------------------------------------
    # Step execution
    # ------------------------------------------------------------------

    def _attempt(
        self, step: PipelineStep, action: Callable[..., StepResult], *args
    ) -> StepResult:
        """Run one step, converting classified failures into a result."""
        logger.debug("Step %s starting", step.value)
        try:
            return action(*args)
        except SvnDiffCommitError as exc:
            return self._failed(step, exc)
        except OSError as exc:
            return self._failed(
                step, IOFailureError(step.value, exc.filename or "", exc)
            )

    @staticmethod
    def _failed(step: PipelineStep, error: SvnDiffCommitError) -> StepResult:
        logger.error("Step %s failed: %s", step.value, error)
        return StepResult(
            step=step,
            success=False,
            error_type=error.error_type,
            error=str(error),
        )

    def _import(self, request: CommitRequest, extra: list[str]) -> StepResult:
        self.client.import_tree(
            request.source_path, request.repository, request.message, extra
        )
        return StepResult(
            step=PipelineStep.IMPORT,
            success=True,
            detail=f"imported {request.source_path}",
        )

    def _checkout(
        self, url: str, working_copy: Path, extra: list[str]
    ) -> StepResult:
        self.client.checkout(url, working_copy, extra)
        return StepResult(step=PipelineStep.CHECKOUT, success=True)

    def _clean(self, working_copy: Path) -> StepResult:
        removed = clean_working_copy_root(working_copy)
        return StepResult(
            step=PipelineStep.CLEAN,
            success=True,
            detail=f"{len(removed)} entries removed",
        )

    def _mirror(self, source: Path, working_copy: Path) -> StepResult:
        copied = mirror_tree(source, working_copy)
        logger.info("Copied %d files from %s", copied, source)
        return StepResult(
            step=PipelineStep.MIRROR,
            success=True,
            detail=f"{copied} files copied",
        )

    def _add(self, working_copy: Path) -> StepResult:
        # Adding the working copy root itself is unreliable on some svn
        # builds, so each top-level entry is added separately.
        entries = top_level_entries(working_copy)
        for entry in entries:
            self.client.add(entry)
        return StepResult(
            step=PipelineStep.ADD,
            success=True,
            detail=f"{len(entries)} entries added",
            paths=[entry.name for entry in entries],
        )

    def _delete(self, working_copy: Path) -> StepResult:
        report = self.client.status(working_copy)
        # Parse everything first so a bad line deletes nothing.
        missing = list(parse_missing(report))
        targets = outermost_paths(missing)
        for path in targets:
            self.client.delete(path)
        if targets:
            logger.info("Scheduled %d missing paths for deletion", len(targets))
        return StepResult(
            step=PipelineStep.DELETE,
            success=True,
            detail=f"{len(targets)} paths deleted",
            paths=targets,
        )

    def _commit(
        self, working_copy: Path, message: str, extra: list[str]
    ) -> StepResult:
        self.client.commit(working_copy, message, extra)
        return StepResult(step=PipelineStep.COMMIT, success=True)

    def _cleanup(self, working_copy: Path) -> StepResult:
        remove_tree(working_copy)
        return StepResult(
            step=PipelineStep.CLEANUP,
            success=True,
            detail=f"removed {working_copy}",
        )
