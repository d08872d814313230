"""Process execution for svn client invocations.

``CommandRunner`` is the narrow seam between the pipeline and the outside
world; tests substitute an in-memory fake.  ``SubprocessRunner`` is the
real implementation.
"""

import logging
import subprocess
from collections.abc import Sequence
from typing import Protocol

from ..errors import ExternalCommandError

logger = logging.getLogger(__name__)

_SECRET_FLAGS = frozenset({"--password"})


def redact_args(args: Sequence[str]) -> list[str]:
    """Return a copy of *args* with the value after ``--password`` masked."""
    out = list(args)
    for i, arg in enumerate(out[:-1]):
        if arg in _SECRET_FLAGS:
            out[i + 1] = "********"
    return out


class CommandRunner(Protocol):
    def invoke(self, program: str, args: Sequence[str]) -> int:
        """Run *program* with inherited stdio and return its exit status."""
        ...

    def capture(
        self, program: str, args: Sequence[str]
    ) -> tuple[int, str]:
        """Run *program* capturing stdout; return ``(status, stdout)``."""
        ...


class SubprocessRunner:
    """Run programs synchronously with ``subprocess.run``.

    No timeout is applied: svn may prompt on the inherited terminal (for
    example to accept a server certificate) and the run waits for it.
    """

    def invoke(self, program: str, args: Sequence[str]) -> int:
        argv = [program, *args]
        logger.debug("exec: %s", redact_args(argv))
        try:
            completed = subprocess.run(argv)
        except OSError as exc:
            raise ExternalCommandError(
                args[0] if args else program,
                None,
                redact_args(argv),
                reason=f"cannot execute {program}: {exc}",
            ) from exc
        return completed.returncode

    def capture(
        self, program: str, args: Sequence[str]
    ) -> tuple[int, str]:
        argv = [program, *args]
        logger.debug("exec (captured): %s", redact_args(argv))
        try:
            completed = subprocess.run(
                argv, stdout=subprocess.PIPE, text=True
            )
        except OSError as exc:
            raise ExternalCommandError(
                args[0] if args else program,
                None,
                redact_args(argv),
                reason=f"cannot execute {program}: {exc}",
            ) from exc
        return completed.returncode, completed.stdout
