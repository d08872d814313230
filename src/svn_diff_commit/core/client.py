import logging
import os
from collections.abc import Sequence

from ..errors import ExternalCommandError
from .runner import CommandRunner, redact_args

logger = logging.getLogger(__name__)

PEG_REVISION_MARKER = "@"

PathArg = str | os.PathLike


def escape_peg_revision(path: str) -> str:
    """Escape *path* so svn does not read a trailing ``@REV`` as a peg.

    svn treats the last ``@`` in a target as the peg revision separator.
    The documented workaround is to append one more ``@``, giving an empty
    peg.  Apply this exactly once per argument.
    """
    if PEG_REVISION_MARKER in path:
        return path + PEG_REVISION_MARKER
    return path


def _local(path: PathArg) -> str:
    return escape_peg_revision(os.fspath(path))


class SvnClient:
    """Thin wrapper over the ``svn`` and ``svnadmin`` command line programs.

    Local filesystem targets are peg-escaped here; repository URLs are
    passed through untouched.  *extra* arguments (marshalled global
    options) are appended to operations that talk to the repository.

    Args:
        runner: Executes the programs.
        executable: svn binary name or path.
        admin_executable: svnadmin binary name or path.
    """

    def __init__(
        self,
        runner: CommandRunner,
        executable: str = "svn",
        admin_executable: str = "svnadmin",
    ):
        self.runner = runner
        self.executable = executable
        self.admin_executable = admin_executable

    def _run(self, operation: str, args: list[str]) -> None:
        code = self.runner.invoke(self.executable, args)
        if code != 0:
            raise ExternalCommandError(
                operation, code, redact_args([self.executable, *args])
            )

    def _capture(self, operation: str, args: list[str]) -> str:
        code, out = self.runner.capture(self.executable, args)
        if code != 0:
            raise ExternalCommandError(
                operation, code, redact_args([self.executable, *args])
            )
        return out

    def can_list(self, url: str, extra: Sequence[str] = ()) -> bool:
        """Return True if ``svn list URL`` succeeds.

        A non-zero exit means the location is unreachable or does not
        exist yet.  A client that cannot be started raises
        ``ExternalCommandError`` instead of returning False, so the
        pipeline ends at the probe rather than attempting an import with
        the same unusable client.
        """
        code = self.runner.invoke(self.executable, ["list", url, *extra])
        logger.debug("svn list %s exited with %d", url, code)
        return code == 0

    def checkout(
        self, url: str, working_copy: PathArg, extra: Sequence[str] = ()
    ) -> None:
        self._run("checkout", ["checkout", url, _local(working_copy), *extra])

    def add(self, path: PathArg) -> None:
        """Schedule *path* for addition, recursing and tolerating tracked paths."""
        self._run("add", ["add", _local(path), "--force"])

    def status(self, working_copy: PathArg) -> str:
        """Return the raw ``svn status`` report for *working_copy*."""
        return self._capture("status", ["status", _local(working_copy)])

    def delete(self, path: PathArg) -> None:
        self._run("delete", ["delete", _local(path)])

    def commit(
        self,
        working_copy: PathArg,
        message: str,
        extra: Sequence[str] = (),
    ) -> None:
        self._run(
            "commit",
            ["commit", _local(working_copy), "--message", message, *extra],
        )

    def import_tree(
        self,
        source: PathArg,
        url: str,
        message: str,
        extra: Sequence[str] = (),
    ) -> None:
        """Publish an unversioned tree directly to *url*."""
        self._run(
            "import",
            ["import", _local(source), url, "--message", message, *extra],
        )

    def list_paths(self, url: str, extra: Sequence[str] = ()) -> list[str]:
        """Return every path under *url*; directories end with ``/``."""
        out = self._capture("list", ["list", "--recursive", url, *extra])
        return [line.strip() for line in out.splitlines() if line.strip()]

    def create_repository(self, path: PathArg) -> None:
        """Create an empty repository with ``svnadmin create``."""
        args = ["create", os.fspath(path)]
        code = self.runner.invoke(self.admin_executable, args)
        if code != 0:
            raise ExternalCommandError(
                "create", code, [self.admin_executable, *args]
            )
