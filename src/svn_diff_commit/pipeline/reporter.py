"""Commit report formatting.

- ``format_commit_report`` -- human-readable post-run summary.
- ``report_to_json`` -- structured dict for ``--json`` output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import CommitReport

# Paths listed per section before the rest are summarised by count.
_MAX_LISTED_PATHS = 20


def _path_section(title: str, paths: list[str]) -> list[str]:
    lines = [f"{title}:"]
    for p in paths[:_MAX_LISTED_PATHS]:
        lines.append(f"  {p}")
    if len(paths) > _MAX_LISTED_PATHS:
        lines.append(f"  ... ({len(paths) - _MAX_LISTED_PATHS} more)")
    lines.append("")
    return lines


def format_commit_report(report: CommitReport) -> str:
    """Format a commit report as human-readable text.

    Args:
        report: The finished run's report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    status = "succeeded" if report.success else "FAILED"
    header = f"Diff commit to {report.repository} {status}"
    if report.mode:
        header += f" ({report.mode})"
    lines.append(header)
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    lines.append("Steps:")
    for r in report.results:
        mark = "ok" if r.success else "FAILED"
        line = f"  [{mark}] {r.step.value}"
        if r.detail:
            line += f" - {r.detail}"
        lines.append(line)
    lines.append("")

    if report.added:
        lines.extend(_path_section("Added", report.added))
    if report.deleted:
        lines.extend(_path_section("Deleted", report.deleted))

    failure = report.failure
    if failure is not None:
        lines.append(f"Error ({failure.error_type}): {failure.error}")

    return "\n".join(lines).rstrip()


def report_to_json(report: CommitReport) -> dict:
    """Convert a commit report to a dict ready for ``json.dumps``."""
    steps = []
    for r in report.results:
        entry: dict = {"step": r.step.value, "success": r.success}
        if r.detail:
            entry["detail"] = r.detail
        if r.paths:
            entry["paths"] = list(r.paths)
        if not r.success:
            entry["error_type"] = r.error_type
            entry["error"] = r.error
        steps.append(entry)

    failure = report.failure
    return {
        "repository": report.repository,
        "working_copy": report.working_copy,
        "mode": report.mode,
        "success": report.success,
        "failed_step": failure.step.value if failure else None,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "added": len(report.added),
            "deleted": len(report.deleted),
        },
        "steps": steps,
    }
