"""Pydantic models describing a diff-commit run.

- ``PipelineStep``: Enum of the steps a run can execute.
- ``StepResult``: Outcome of one step.
- ``CommitReport``: Ordered step results for a whole run.

All models are frozen (immutable).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class PipelineStep(str, Enum):
    """Steps of a diff-commit run, in execution order."""

    VALIDATE = "validate"
    PROBE = "probe"
    IMPORT = "import"
    CHECKOUT = "checkout"
    CLEAN = "clean"
    MIRROR = "mirror"
    ADD = "add"
    DELETE = "delete"
    COMMIT = "commit"
    CLEANUP = "cleanup"


class StepResult(BaseModel):
    """Result of one pipeline step.

    Attributes:
        step: The step that ran.
        success: Whether it completed.
        detail: Short human-readable note (e.g. "3 files copied").
        paths: Paths acted on (added or deleted entries).
        error_type: ``SvnDiffCommitError.error_type`` of the failure.
        error: Error message if the step failed.
    """

    step: PipelineStep
    success: bool
    detail: str | None = None
    paths: list[str] = []
    error_type: str | None = None
    error: str | None = None

    model_config = {"frozen": True}


class CommitReport(BaseModel):
    """Report for a full diff-commit run.

    A run stops at its first failed step, so at most the last result is
    unsuccessful.

    Attributes:
        repository: Target repository URL.
        working_copy: Working copy path (unused by imports).
        mode: ``"import"`` or ``"checkout"`` once the probe has run.
        results: Step results in execution order.
        started_at: ISO 8601 timestamp when the run started.
        completed_at: ISO 8601 timestamp when the run ended.
    """

    repository: str
    working_copy: str
    mode: str | None = None
    results: list[StepResult] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def success(self) -> bool:
        return bool(self.results) and all(r.success for r in self.results)

    @property
    def failure(self) -> StepResult | None:
        """The failed step, or ``None`` if every step succeeded."""
        for r in self.results:
            if not r.success:
                return r
        return None

    @property
    def steps(self) -> list[PipelineStep]:
        return [r.step for r in self.results]

    def result_for(self, step: PipelineStep) -> StepResult | None:
        for r in self.results:
            if r.step == step:
                return r
        return None

    @property
    def added(self) -> list[str]:
        r = self.result_for(PipelineStep.ADD)
        return list(r.paths) if r else []

    @property
    def deleted(self) -> list[str]:
        r = self.result_for(PipelineStep.DELETE)
        return list(r.paths) if r else []
