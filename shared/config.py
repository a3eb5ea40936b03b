"""Configuration management for the Plugin Release Diff tool."""

import os
from typing import Optional, Tuple
from dataclasses import dataclass, field


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_timeout(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from e


@dataclass
class Config:
    """Central configuration for the collector, reporter and supervisor."""

    # Logging Configuration
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    verbose: bool = field(default_factory=lambda: _env_bool("PLUGIN_DIFF_VERBOSE", "false"))

    # Workspace Configuration
    scratch_dir: Optional[str] = field(default_factory=lambda: os.getenv("PLUGIN_DIFF_SCRATCH_DIR"))
    report_filename: str = field(default_factory=lambda: os.getenv("PLUGIN_DIFF_REPORT_FILE", "diff.txt"))

    # Archive Layout
    plugin_path_prefixes: Tuple[str, ...] = ("plugins/", "optional-plugins/")
    plugin_extensions: Tuple[str, ...] = (".hpi", ".jpi")
    descriptor_name: str = field(default_factory=lambda: os.getenv("PLUGIN_DIFF_DESCRIPTOR", "pom.xml"))

    # Git Configuration
    git_timeout_seconds: Optional[float] = field(default_factory=lambda: _env_timeout("PLUGIN_DIFF_GIT_TIMEOUT"))
    git_user_name: str = field(default_factory=lambda: os.getenv("GIT_USER_NAME", "plugin-diff"))
    git_user_email: str = field(default_factory=lambda: os.getenv("GIT_USER_EMAIL", "plugin-diff@localhost"))
    baseline_branch: str = field(default_factory=lambda: os.getenv("PLUGIN_DIFF_BASELINE_BRANCH", "plugin-diff-empty-baseline"))
    scm_prefixes: Tuple[str, ...] = ("scm:git:",)

    # Repository Credentials
    scm_token: Optional[str] = field(default_factory=lambda: os.getenv("SCM_TOKEN"))
    scm_username: Optional[str] = field(default_factory=lambda: os.getenv("SCM_USERNAME"))
    scm_password: Optional[str] = field(default_factory=lambda: os.getenv("SCM_PASSWORD"))

    # Report Configuration
    versions_only: bool = field(default_factory=lambda: _env_bool("PLUGIN_DIFF_VERSIONS_ONLY", "false"))
    additions_only: bool = field(default_factory=lambda: _env_bool("PLUGIN_DIFF_ADDITIONS_ONLY", "true"))
    hide_unchanged: bool = field(default_factory=lambda: _env_bool("PLUGIN_DIFF_HIDE_UNCHANGED", "false"))

    def validate(self) -> None:
        """Validate configuration and raise errors for invalid values."""
        required_fields = [
            ("report_filename", self.report_filename),
            ("descriptor_name", self.descriptor_name),
            ("baseline_branch", self.baseline_branch),
            ("plugin_path_prefixes", self.plugin_path_prefixes),
            ("plugin_extensions", self.plugin_extensions),
        ]

        missing = [name for name, value in required_fields if not value]
        if missing:
            raise ValueError(f"Missing required configuration fields: {missing}")

        if self.git_timeout_seconds is not None and self.git_timeout_seconds <= 0:
            raise ValueError(f"git_timeout_seconds must be positive, got {self.git_timeout_seconds}")

        if self.baseline_branch.startswith("-") or " " in self.baseline_branch:
            raise ValueError(f"Invalid baseline branch name: {self.baseline_branch!r}")

    @property
    def include_diff_bodies(self) -> bool:
        """Whether the report streams full diff bodies after the summary."""
        return not self.versions_only

    @property
    def is_debug(self) -> bool:
        return self.verbose or self.log_level.upper() == "DEBUG"
