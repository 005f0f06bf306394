from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs
from pydantic import BaseModel, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_NAME = "vuln_gate"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _default_home() -> Path:
    """Get default home directory using platformdirs."""
    return Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_cache_dir)


class DirectoryConfig(BaseModel):
    """Directory configuration with computed paths."""

    home: Path = Field(
        default_factory=_default_home,
        description="Base directory for vuln_gate data",
    )

    @computed_field
    @property
    def logs_dir(self) -> Path:
        """Directory for JSONL run logs."""
        return self.home / "logs"


class ReportConfig(BaseModel):
    """Defaults for the report command; CLI flags take precedence."""

    fail_on_vuln: bool = Field(
        default=True,
        description="Exit with code 1 when new reachability-confirmed vulnerabilities are found",
    )

    show_all_vulns: bool = Field(
        default=False,
        description="Include uncalled and unimportant vulnerabilities in human-readable reports",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    logger_name: str = Field(default="vuln_gate", description="Logger name")
    console_output: bool = Field(default=True, description="Print log lines to stderr")
    json_log: bool = Field(
        default=False,
        description="Append structured JSON log records to <logs_dir>/vuln-gate.jsonl",
    )

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r} (expected one of: {', '.join(LOG_LEVELS)})")
        return level


class ProvenanceConfig(BaseModel):
    """Git commit extraction settings."""

    include_root_git: bool = Field(
        default=True,
        description="Report the HEAD commit of the repository itself, not only its submodules",
    )
    disabled: bool = Field(default=False, description="Skip git metadata entirely")


class AppConfig(BaseSettings):
    """Root application configuration.

    All configuration is loaded from environment variables with VULN_GATE_ prefix.
    Use double underscore for nested config: VULN_GATE_REPORT__FAIL_ON_VULN

    Example env vars:
        export VULN_GATE_REPORT__FAIL_ON_VULN=false
        export VULN_GATE_REPORT__SHOW_ALL_VULNS=true
        export VULN_GATE_LOGGING__LEVEL=DEBUG
        export VULN_GATE_LOGGING__JSON_LOG=true
        export VULN_GATE_DIRECTORIES__HOME=/custom/path
        export VULN_GATE_PROVENANCE__INCLUDE_ROOT_GIT=false
    """

    model_config = SettingsConfigDict(
        env_prefix="VULN_GATE_",
        env_nested_delimiter="__",
        frozen=True,
        extra="forbid",
    )

    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    provenance: ProvenanceConfig = Field(default_factory=ProvenanceConfig)

    def with_overrides(self, **sections: dict[str, object]) -> "AppConfig":
        """Return a copy with some fields of the named sections replaced.

        ``None`` values are ignored so unset CLI options keep the configured value.
        Changed sections are validated again.

        Raises:
            ValidationError: If an override is not a valid value
        """
        update = {}
        for name, values in sections.items():
            changes = {k: v for k, v in values.items() if v is not None}
            if changes:
                section = getattr(self, name)
                update[name] = type(section).model_validate({**section.model_dump(), **changes})
        return self.model_copy(update=update) if update else self
