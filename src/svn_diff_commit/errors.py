"""Error types and shared formatting for svn-diff-commit.

Every failure the tool classifies derives from ``SvnDiffCommitError`` and
carries an ``error_type`` string.  The pipeline copies that string into its
step results, and ``describe_error()`` pairs it with a corrective hint for
the operator.
"""

from __future__ import annotations

import os
from collections.abc import Sequence


class SvnDiffCommitError(Exception):
    """Base class for all classified svn-diff-commit failures."""

    error_type = "error"


# ---------------------------------------------------------------------------
# Request / pipeline errors
# ---------------------------------------------------------------------------


class MissingRequiredFieldError(SvnDiffCommitError):
    """A required commit request field is empty."""

    error_type = "missing_required_field"

    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f"Missing flag {flag}")


class ExternalCommandError(SvnDiffCommitError):
    """A client invocation exited non-zero or could not be started.

    Attributes:
        operation: Client operation name (``checkout``, ``commit``, ...).
        returncode: Process exit status, or ``None`` if it never ran.
        argv: The full argument vector, with secrets already masked.
    """

    error_type = "external_command_failed"

    def __init__(
        self,
        operation: str,
        returncode: int | None,
        argv: Sequence[str] = (),
        reason: str | None = None,
    ) -> None:
        self.operation = operation
        self.returncode = returncode
        self.argv = list(argv)
        if reason is None:
            reason = f"exited with status {returncode}"
        program = os.path.basename(self.argv[0]) if self.argv else "svn"
        super().__init__(f"{program} {operation} failed: {reason}")


class IOFailureError(SvnDiffCommitError):
    """A filesystem copy, create or remove operation failed."""

    error_type = "io_failure"

    def __init__(self, operation: str, path: str, cause: OSError) -> None:
        self.operation = operation
        self.path = path
        self.cause = cause
        super().__init__(f"{operation} failed for {path}: {cause}")


class UnrecognizedStatusLineError(SvnDiffCommitError):
    """An ``svn status`` line starts with ``!`` but has no separator."""

    error_type = "unrecognized_status_line"

    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__(f"Unknown status line: {line}")


class SelfTestError(SvnDiffCommitError):
    """The self-test observed an unexpected repository state."""

    error_type = "self_test_failed"


# ---------------------------------------------------------------------------
# Argument marshalling errors
# ---------------------------------------------------------------------------


class MarshalError(SvnDiffCommitError):
    """Base class for argument vector <-> schema conversion failures."""

    error_type = "marshal_error"


class UnannotatedFieldError(MarshalError):
    error_type = "unannotated_field"

    def __init__(self, owner: str, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(
            f"Field {owner}.{field_name} has no flag annotation"
        )


class UnsupportedFieldTypeError(MarshalError):
    error_type = "unsupported_field_type"

    def __init__(self, field_name: str, field_type: object) -> None:
        self.field_name = field_name
        super().__init__(
            f"Unsupported type for field {field_name}: {field_type!r}"
        )


class DuplicateKeyError(MarshalError):
    error_type = "duplicate_key"

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Duplicate keys: {key}")


class MultipleValuesForKeyError(MarshalError):
    error_type = "multiple_values_for_key"

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Expected single value for: {key}")


class KeyExpectedError(MarshalError):
    error_type = "key_expected"

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Expected key (--), found: {token}")


class UnknownOptionError(MarshalError):
    error_type = "unknown_option"

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unknown option: {key}")


class FlagSyntaxError(MarshalError):
    """A value was supplied for a boolean flag."""

    error_type = "syntax_error"

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Syntax error: {key} {value}")


class MissingValueError(MarshalError):
    error_type = "missing_value"

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Value missing for key: {key}")


# ---------------------------------------------------------------------------
# Corrective action messages
# ---------------------------------------------------------------------------

_CORRECTIVE_ACTIONS: dict[str, str] = {
    "missing_required_field": "Pass --src, --repos and --wc (or set SVNDC_SRC, SVNDC_REPOS, SVNDC_WC).",
    "external_command_failed": "Check the svn output above; verify the repository URL, credentials and that svn is on PATH.",
    "io_failure": "Check that the source exists and the working copy path is writable.",
    "unrecognized_status_line": "Inspect 'svn status' output for the working copy; it may be from an unsupported svn version.",
    "self_test_failed": "Run again with --debug to see every svn invocation.",
}

_MARSHAL_ACTION = "Run svndc --help for the list of supported flags."

_MARSHAL_TYPES = frozenset(
    cls.error_type
    for cls in (
        MarshalError,
        UnannotatedFieldError,
        UnsupportedFieldTypeError,
        DuplicateKeyError,
        MultipleValuesForKeyError,
        KeyExpectedError,
        UnknownOptionError,
        FlagSyntaxError,
        MissingValueError,
    )
)


def corrective_action(error_type: str | None) -> str | None:
    """Return the operator hint for *error_type*, if there is one."""
    if error_type is None:
        return None
    if error_type in _MARSHAL_TYPES:
        return _MARSHAL_ACTION
    return _CORRECTIVE_ACTIONS.get(error_type)


def describe_error(error: BaseException) -> str:
    """Format an error with a corrective hint for the operator.

    Args:
        error: Any exception; classified errors get a type-specific hint.

    Returns:
        ``"Error (<type>): <message>"`` followed by an ``Action:`` line when
        a hint is known.
    """
    error_type = getattr(error, "error_type", type(error).__name__)
    text = f"Error ({error_type}): {error}"

    action = corrective_action(error_type)
    if action:
        text += f"\n\nAction: {action}"
    return text
