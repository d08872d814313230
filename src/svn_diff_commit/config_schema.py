"""Unified configuration schema for svn_diff_commit.

Defines Pydantic models for the YAML config file, with dedicated sections
for the svn client, commit defaults and logging.

Usage:
    from svn_diff_commit.config_schema import build_config

    raw = load_hierarchical_config()
    unified = build_config(raw)
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class SvnConfig(BaseModel):
    """svn client settings.

    Executables are looked up on ``PATH`` unless given as absolute paths.
    The remaining fields are defaults for the svn global options; CLI
    flags and ``SVNDC_*`` env vars take precedence over them.
    """

    executable: str = Field(default="svn", description="svn binary")
    admin_executable: str = Field(
        default="svnadmin", description="svnadmin binary (self-test only)"
    )
    username: str | None = Field(default=None, description="svn username")
    password: str | None = Field(default=None, description="svn password")
    config_dir: str | None = Field(
        default=None, description="svn --config-dir"
    )
    config_option: str | None = Field(
        default=None, description="svn --config-option"
    )
    trust_server_cert_failures: str | None = Field(
        default=None, description="svn --trust-server-cert-failures"
    )
    no_auth_cache: bool = Field(
        default=False, description="Do not cache credentials"
    )
    non_interactive: bool = Field(
        default=False, description="Never prompt the operator"
    )

    model_config = {"frozen": True}


class CommitConfig(BaseModel):
    """Defaults for a diff-commit run."""

    source: str | None = Field(default=None, description="Source dir")
    repository: str | None = Field(
        default=None, description="Target repository URL"
    )
    working_copy: str | None = Field(
        default=None, description="Working copy path"
    )
    message: str | None = Field(default=None, description="Commit message")
    delete_working_copy: bool = Field(
        default=False,
        description="Delete the working copy after a successful commit",
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: ``text`` or ``json``.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: str = Field(
        default="text", pattern="^(text|json)$", description="Log format"
    )

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level configuration.

    Every section has defaults, so ``UnifiedConfig()`` (zero-config) is
    always valid.
    """

    svn: SvnConfig = Field(default_factory=SvnConfig)
    commit: CommitConfig = Field(default_factory=CommitConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the merged YAML mapping.

    Missing sections get defaults.

    Raises:
        pydantic.ValidationError: A section has an invalid value.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)
