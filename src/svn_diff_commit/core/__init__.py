"""svn client plumbing shared by the pipeline, the self-test and the CLI."""

from .client import SvnClient, escape_peg_revision
from .runner import CommandRunner, SubprocessRunner
from .status import parse_missing

__all__ = [
    "CommandRunner",
    "SubprocessRunner",
    "SvnClient",
    "escape_peg_revision",
    "parse_missing",
]
