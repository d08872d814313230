"""Command line entry point for svn-diff-commit (``svndc``).

Parses flags with the package's own argument marshaller, so the flag set
is exactly the fields of ``config.CommandLine``; svn global options are
accepted under their svn names and forwarded unchanged.
"""

import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from . import __version__
from .config import CommandLine, resolve_options, resolve_request
from .config_loader import discover_config_files, load_hierarchical_config
from .config_schema import UnifiedConfig, build_config
from .core import SubprocessRunner, SvnClient
from .errors import (
    MarshalError,
    SvnDiffCommitError,
    corrective_action,
    describe_error,
)
from .flags import parse_args
from .logger import setup_logging
from .pipeline import DiffCommitPipeline, format_commit_report, report_to_json
from .selftest import run_self_test

logger = logging.getLogger(__name__)

HELP = """\
svndc (Subversion Diff Commit)
usage:
svndc --src PATH --repos URL --wc PATH --message "There are only 12 cylon models." --username GBaltar --password 123Caprica ...

--help       Print syntax help
--version    Print version
--src        Path to directory with files to commit
--repos      Target SVN repository URL (commit destination)
--wc         Working copy path. This path will be created by svn
             checkout, if it does not exist. Files from --src
             will be copied here. Files not present in --src
             will be svn-deleted in --wc.
--wc-delete  Will delete --wc path after svn commit.
--message    Message for svn commit.
--self-test  Requires svnadmin. Will create a local repository in
             the directory ./self_test/repos and use it for tests. The
             directory ./self_test will be deleted when tests complete.
--debug      Print extra information, including every svn invocation
             (passwords are masked).
--json       Print the final report as JSON.
--log-file   Also write log records to this file.
--config     YAML config file to use instead of the discovered ones.

SVN global args (see svn documentation):

--config-dir ARG
--config-option ARG
--no-auth-cache
--non-interactive
--password ARG
--trust-server-cert-failures ARG
--username ARG

Environment variables SVNDC_SRC, SVNDC_REPOS, SVNDC_WC, SVNDC_MESSAGE,
SVNDC_USERNAME and SVNDC_PASSWORD are used for flags not given on the
command line (a .env file in the current directory is read first).
"""


def _stderr_print(msg: str) -> None:
    print(msg, file=sys.stderr, flush=True)


def parse_command_line(argv: Sequence[str]) -> CommandLine:
    """Parse *argv* (without the program name) into a ``CommandLine``.

    Raises:
        MarshalError: Unknown, duplicate or malformed flags.
    """
    return parse_args(argv, CommandLine())


def load_unified_config(explicit: str = "") -> UnifiedConfig:
    """Load the YAML configuration.

    Args:
        explicit: Path given with ``--config``; when set, discovery is
            skipped and the file must exist.
    """
    if explicit:
        raw = load_hierarchical_config([Path(explicit).expanduser()])
        logger.debug("Configuration loaded from: %s", explicit)
    else:
        raw = load_hierarchical_config()
        files = discover_config_files()
        if files:
            logger.debug("Configuration loaded from: %s", files[0])
    return build_config(raw)


def _run_self_test(client: SvnClient) -> int:
    print("\n\nSelf test --> Start...\n\n")
    try:
        run_self_test(client, Path.cwd())
    except (SvnDiffCommitError, OSError) as exc:
        logger.error("Self test failed: %s", exc)
        _stderr_print(describe_error(exc))
        return 1
    print("\n\nSelf test --> Success.\n\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run svndc and return the process exit status."""
    if argv is None:
        argv = sys.argv[1:]

    if not argv:
        print(HELP)
        return 0

    try:
        cmd = parse_command_line(argv)
    except MarshalError as exc:
        _stderr_print(HELP)
        _stderr_print(describe_error(exc))
        return 2

    if cmd.help:
        print(HELP)
        return 0
    if cmd.version:
        print(f"svndc version {__version__}")
        return 0

    # .env first, so YAML ${VAR} interpolation can see its values
    load_dotenv()
    try:
        unified = load_unified_config(cmd.config)
    except (OSError, yaml.YAMLError, ValidationError) as exc:
        _stderr_print(f"ERROR: Configuration error: {exc}")
        return 1

    setup_logging(
        debug=cmd.debug,
        log_file=cmd.log_file or unified.logging.file,
        debug_format=unified.logging.format,
        default_level=unified.logging.level,
    )

    client = SvnClient(
        SubprocessRunner(),
        executable=unified.svn.executable,
        admin_executable=unified.svn.admin_executable,
    )

    if cmd.self_test:
        return _run_self_test(client)

    request = resolve_request(cmd.commit, unified)
    options = resolve_options(cmd.client, unified)

    report = DiffCommitPipeline(client).run(request, options)

    if cmd.json:
        print(json.dumps(report_to_json(report), indent=2))
    else:
        print(format_commit_report(report))

    failure = report.failure
    if failure is not None:
        action = corrective_action(failure.error_type)
        if action:
            _stderr_print(f"Action: {action}")
        return 1
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        _stderr_print("\nInterrupted.")
        sys.exit(1)


if __name__ == "__main__":
    run()
