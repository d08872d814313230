"""Run configuration: commit request, svn global options and CLI schema.

The dataclasses here double as argument schemas for ``flags.ArgMarshaller``:
each field carries the flag name it is parsed from on the ``svndc`` command
line (and, for ``GlobalClientOptions``, the identical svn global option it
is forwarded as).

Precedence for resolved values (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    SVNDC_SRC: Source directory to publish.
    SVNDC_REPOS: Target repository URL.
    SVNDC_WC: Working copy path.
    SVNDC_MESSAGE: Commit message.
    SVNDC_USERNAME: svn --username.
    SVNDC_PASSWORD: svn --password (preferred over --password, which is
        visible in the process list).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from .flags import embedded, option

if TYPE_CHECKING:
    from .config_schema import UnifiedConfig

logger = logging.getLogger(__name__)


@dataclass
class CommitRequest:
    source_path: str = option("--src")
    repository: str = option("--repos")
    working_copy: str = option("--wc")
    message: str = option("--message")
    delete_working_copy: bool = option("--wc-delete", False)


@dataclass
class GlobalClientOptions:
    """svn global options forwarded to every network-facing invocation.

    Empty strings and ``False`` are omitted from the generated arguments;
    nothing is defaulted on the caller's behalf.
    """

    config_dir: str = option("--config-dir")
    config_option: str = option("--config-option")
    no_auth_cache: bool = option("--no-auth-cache", False)
    non_interactive: bool = option("--non-interactive", False)
    password: str = option("--password")
    trust_server_cert_failures: str = option(
        "--trust-server-cert-failures"
    )
    username: str = option("--username")


@dataclass
class CommandLine:
    help: bool = option("--help", False)
    version: bool = option("--version", False)
    self_test: bool = option("--self-test", False)
    debug: bool = option("--debug", False)
    json: bool = option("--json", False)
    log_file: str = option("--log-file")
    config: str = option("--config")
    commit: CommitRequest = embedded(CommitRequest)
    client: GlobalClientOptions = embedded(GlobalClientOptions)


def _first(*values: str | None) -> str:
    for value in values:
        if value:
            return value.strip()
    return ""


def resolve_request(
    cli: CommitRequest, unified: UnifiedConfig | None = None
) -> CommitRequest:
    """Fill unset request fields from env vars and the YAML ``commit`` section.

    Args:
        cli: Request as parsed from the command line.
        unified: Loaded YAML configuration, if any.

    Returns:
        A new ``CommitRequest``; *cli* is not modified.  Fields missing
        from every source stay empty so validation can report them.
    """
    yaml_commit = unified.commit if unified is not None else None

    return CommitRequest(
        source_path=_first(
            cli.source_path,
            os.getenv("SVNDC_SRC"),
            yaml_commit.source if yaml_commit else None,
        ),
        repository=_first(
            cli.repository,
            os.getenv("SVNDC_REPOS"),
            yaml_commit.repository if yaml_commit else None,
        ),
        working_copy=_first(
            cli.working_copy,
            os.getenv("SVNDC_WC"),
            yaml_commit.working_copy if yaml_commit else None,
        ),
        # Messages keep their inner whitespace; only fall through when empty.
        message=cli.message
        or os.getenv("SVNDC_MESSAGE")
        or (yaml_commit.message if yaml_commit else None)
        or "",
        delete_working_copy=cli.delete_working_copy
        or bool(yaml_commit and yaml_commit.delete_working_copy),
    )


def resolve_options(
    cli: GlobalClientOptions, unified: UnifiedConfig | None = None
) -> GlobalClientOptions:
    """Fill unset global options from env vars and the YAML ``svn`` section."""
    svn = unified.svn if unified is not None else None

    resolved = replace(
        cli,
        username=_first(
            cli.username,
            os.getenv("SVNDC_USERNAME"),
            svn.username if svn else None,
        ),
        password=cli.password
        or os.getenv("SVNDC_PASSWORD")
        or (svn.password if svn else None)
        or "",
    )
    if svn is None:
        return resolved

    return replace(
        resolved,
        config_dir=resolved.config_dir or (svn.config_dir or ""),
        config_option=resolved.config_option or (svn.config_option or ""),
        trust_server_cert_failures=resolved.trust_server_cert_failures
        or (svn.trust_server_cert_failures or ""),
        no_auth_cache=resolved.no_auth_cache or svn.no_auth_cache,
        non_interactive=resolved.non_interactive or svn.non_interactive,
    )
