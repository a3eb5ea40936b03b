"""Shared data models for the Plugin Release Diff tool."""

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum


class SkipReason(str, Enum):
    """Why a bundled plugin did not make it into a snapshot."""
    NO_DESCRIPTOR = "no_descriptor"
    PARSE_ERROR = "parse_error"
    MISSING_VERSION = "missing_version"
    MISSING_SCM = "missing_scm"
    REPOSITORY_UNAVAILABLE = "repository_unavailable"
    COMMIT_NOT_FOUND = "commit_not_found"


# Descriptor Models
class Descriptor(BaseModel):
    """Normalized view of a plugin's build descriptor (pom.xml)."""
    model_config = ConfigDict(frozen=True)

    artifact_id: str = Field(..., description="Maven artifactId")
    group_id: Optional[str] = Field(None, description="Declared groupId")
    own_version: Optional[str] = Field(None, description="Version declared by the project itself")
    parent_version: Optional[str] = Field(None, description="Version of the parent project")
    parent_group_id: Optional[str] = Field(None, description="groupId of the parent project")
    scm_connection: Optional[str] = Field(None, description="Raw <scm><connection> value")
    scm_developer_connection: Optional[str] = Field(None, description="Raw <scm><developerConnection> value")
    scm_url: Optional[str] = Field(None, description="Raw <scm><url> value")

    @property
    def effective_version(self) -> Optional[str]:
        """Own version, else the version inherited from the parent."""
        if self.own_version is not None:
            return self.own_version
        return self.parent_version

    @property
    def effective_group_id(self) -> Optional[str]:
        if self.group_id is not None:
            return self.group_id
        return self.parent_group_id


class ResolvedCommit(BaseModel):
    """Commit whose descriptor declares the requested version."""
    model_config = ConfigDict(frozen=True)

    commit_id: str = Field(..., description="Full commit hash")
    descriptor: Descriptor = Field(..., description="Descriptor as it existed at the commit")


class ResolvedPluginInfo(BaseModel):
    """A plugin version pinned to the commit that produced it."""
    model_config = ConfigDict(frozen=True)

    descriptor: Descriptor = Field(..., description="Descriptor bundled in the archive")
    repo_work_dir: Path = Field(..., description="Local clone holding the plugin sources")
    commit_id: str = Field(..., description="Commit declaring the installed version")
    version: str = Field(..., description="Installed plugin version")

    @property
    def artifact_id(self) -> str:
        return self.descriptor.artifact_id


class Snapshot:
    """
    Resolved plugins of one distribution archive.

    Entries are keyed by artifactId alone: a second plugin with the same
    artifactId (even under another groupId) is ignored and the first one
    added is kept.
    """

    def __init__(self, archive_path: Optional[Path] = None):
        self.archive_path = archive_path
        self._infos: Dict[str, ResolvedPluginInfo] = {}
        self.skipped: Dict[str, SkipReason] = {}

    def add(self, info: ResolvedPluginInfo) -> bool:
        """Add an entry; returns False when the artifactId is already present."""
        if info.artifact_id in self._infos:
            return False
        self._infos[info.artifact_id] = info
        return True

    def skip(self, entry_name: str, reason: SkipReason) -> None:
        self.skipped[entry_name] = reason

    def get(self, artifact_id: str) -> Optional[ResolvedPluginInfo]:
        return self._infos.get(artifact_id)

    @property
    def artifact_ids(self) -> List[str]:
        return sorted(self._infos)

    def __contains__(self, artifact_id: object) -> bool:
        return artifact_id in self._infos

    def __iter__(self) -> Iterator[ResolvedPluginInfo]:
        for artifact_id in sorted(self._infos):
            yield self._infos[artifact_id]

    def __len__(self) -> int:
        return len(self._infos)

    def __repr__(self) -> str:
        return f"Snapshot(archive_path={self.archive_path!r}, plugins={self.artifact_ids!r})"


# Reconciliation Models
class PluginDiff(BaseModel):
    """A plugin in the new snapshot together with its previous version, if any."""
    model_config = ConfigDict(frozen=True)

    from_info: Optional[ResolvedPluginInfo] = Field(None, description="Previous version; None for new plugins")
    to_info: ResolvedPluginInfo = Field(..., description="Version in the new snapshot")

    @property
    def artifact_id(self) -> str:
        return self.to_info.artifact_id

    @property
    def is_new(self) -> bool:
        return self.from_info is None

    @property
    def is_unchanged(self) -> bool:
        """Present on both sides at the same commit."""
        return self.from_info is not None and self.from_info.commit_id == self.to_info.commit_id


class Classification(BaseModel):
    """Result of reconciling an old snapshot against a new one."""
    new_plugins: List[PluginDiff] = Field(default_factory=list, description="Plugins absent from the old snapshot")
    updated_plugins: List[PluginDiff] = Field(default_factory=list, description="Plugins present in both snapshots")

    @property
    def unchanged_plugins(self) -> List[PluginDiff]:
        return [diff for diff in self.updated_plugins if diff.is_unchanged]


class ComparisonResult(BaseModel):
    """Outcome of a supervisor run."""
    mode: Literal["list", "compare"] = Field(..., description="Run mode")
    new_archive: Path = Field(..., description="Archive being inspected")
    previous_archive: Optional[Path] = Field(None, description="Archive compared against")
    scratch_dir: Path = Field(..., description="Working directory for clones and packages")
    report_file: Optional[Path] = Field(None, description="Report written in compare mode")
    listed_plugins: List[str] = Field(default_factory=list, description="artifactIds of the new snapshot")
    new_plugins: List[str] = Field(default_factory=list, description="artifactIds classified as new")
    updated_plugins: List[str] = Field(default_factory=list, description="artifactIds classified as updated")
    diff_failures: List[str] = Field(default_factory=list, description="artifactIds whose diff could not be generated")
    skipped: Dict[str, SkipReason] = Field(default_factory=dict, description="Skipped package entries")
