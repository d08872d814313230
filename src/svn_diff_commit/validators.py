"""
Input validation for commit requests.

Runs once at pipeline entry, before any svn invocation.
"""

from .config import CommitRequest
from .errors import MissingRequiredFieldError

# Checked in this order; the first empty one is reported.
_REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("source_path", "--src"),
    ("repository", "--repos"),
    ("working_copy", "--wc"),
)


def missing_fields(request: CommitRequest) -> list[str]:
    """
    List the flags of required request fields that are empty.

    Args:
        request: The commit request to inspect

    Returns:
        Flag names (e.g. ``"--src"``) in declaration order; empty when
        the request is complete.
    """
    return [
        flag
        for attr, flag in _REQUIRED_FIELDS
        if not getattr(request, attr).strip()
    ]


def validate_commit_request(request: CommitRequest) -> None:
    """
    Validate a commit request.

    Raises:
        MissingRequiredFieldError: For the first required field that is
            empty or whitespace-only.
    """
    missing = missing_fields(request)
    if missing:
        raise MissingRequiredFieldError(missing[0])
