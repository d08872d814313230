"""Diff-commit reconciliation pipeline.

Publishes the contents of a local directory to a Subversion repository as
a single changeset, driving the ``svn`` command line client.

Modules:

- ``engine``   -- ``DiffCommitPipeline``: runs the import-or-checkout flow.
- ``models``   -- ``PipelineStep``, ``StepResult``, ``CommitReport``.
- ``reporter`` -- human-readable and JSON report formatting.

Usage example
-------------
::

    from svn_diff_commit.config import CommitRequest, GlobalClientOptions
    from svn_diff_commit.core import SubprocessRunner, SvnClient
    from svn_diff_commit.pipeline import DiffCommitPipeline, format_commit_report

    pipeline = DiffCommitPipeline(SvnClient(SubprocessRunner()))
    report = pipeline.run(
        CommitRequest(
            source_path="build/docs",
            repository="https://svn.example.com/repos/docs/trunk",
            working_copy="/tmp/docs-wc",
            message="Publish docs",
        ),
        GlobalClientOptions(non_interactive=True),
    )
    print(format_commit_report(report))
"""

from .engine import DiffCommitPipeline, outermost_paths
from .models import CommitReport, PipelineStep, StepResult
from .reporter import format_commit_report, report_to_json

__all__ = [
    "CommitReport",
    "DiffCommitPipeline",
    "PipelineStep",
    "StepResult",
    "format_commit_report",
    "outermost_paths",
    "report_to_json",
]
