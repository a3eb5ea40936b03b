"""
Snapshot Collector

Scans one distribution archive and resolves every bundled plugin to the
commit that produced its version:

    archive entry -> embedded pom.xml -> scm connection -> local clone -> commit

Plugins that cannot be tracked (no descriptor, no version, no SCM info,
unreachable repository, version not found in history) are logged and left
out of the snapshot. Only failing to read the archive itself aborts.
"""

import logging
from pathlib import Path
from typing import Optional

from shared.config import Config
from shared.logging_config import get_worker_logger
from shared.models import ResolvedPluginInfo, SkipReason, Snapshot
from shared.plugin_analyzer import (
    CommitResolver,
    DistributionArchive,
    GitScmClient,
    MissingScmError,
    PackageEntry,
    PluginSkipped,
    RepositoryFetcher,
    extract_descriptor,
    parse_descriptor,
    require_usable,
    substitute_placeholders,
)

logger = get_worker_logger("snapshot_collector")

# Skips that explain why a plugin with a valid descriptor cannot be tracked
_INFO_SKIPS = {
    SkipReason.MISSING_SCM,
    SkipReason.REPOSITORY_UNAVAILABLE,
    SkipReason.COMMIT_NOT_FOUND,
}


class SnapshotCollector:
    """Builds a Snapshot from a distribution archive."""

    def __init__(self, config: Config, scm=None,
                 fetcher: Optional[RepositoryFetcher] = None,
                 resolver: Optional[CommitResolver] = None,
                 log: Optional[logging.Logger] = None):
        self.config = config
        self.logger = log or logger
        self.scm = scm or GitScmClient(
            timeout=config.git_timeout_seconds,
            user_name=config.git_user_name,
            user_email=config.git_user_email,
        )
        self.fetcher = fetcher or RepositoryFetcher(
            self.scm,
            scm_prefixes=config.scm_prefixes,
            token=config.scm_token,
            username=config.scm_username,
            password=config.scm_password,
        )
        self.resolver = resolver or CommitResolver(self.scm, descriptor_path=config.descriptor_name)

    def collect(self, archive_path: Path, scratch_dir: Path) -> Snapshot:
        """
        Resolve all plugins bundled in ``archive_path``.

        Args:
            archive_path: Distribution archive (WAR)
            scratch_dir: Working directory for extracted packages and clones

        Returns:
            Snapshot of resolved plugins, with skipped entries recorded

        Raises:
            ArchiveReadError: the archive cannot be opened or read
        """
        archive_path = Path(archive_path)
        scratch_dir = Path(scratch_dir)
        scratch_dir.mkdir(parents=True, exist_ok=True)
        snapshot = Snapshot(archive_path=archive_path)

        self.logger.info(f"🔍 Scanning plugins in: {archive_path}")
        with DistributionArchive(archive_path) as archive:
            entries = archive.list_packages(self.config.plugin_path_prefixes, self.config.plugin_extensions)
            self.logger.info(f"   Found {len(entries)} plugin packages")

            for entry in entries:
                try:
                    info = self._process_entry(archive, entry, scratch_dir)
                except PluginSkipped as e:
                    self._log_skip(entry, e)
                    snapshot.skip(entry.name, e.reason)
                    continue

                if info is None:
                    snapshot.skip(entry.name, SkipReason.NO_DESCRIPTOR)
                elif not snapshot.add(info):
                    self.logger.warning(
                        f"⚠️ Duplicate artifactId {info.artifact_id} in {entry.name}, keeping the first entry"
                    )

        self.logger.info(f"✅ Resolved {len(snapshot)} plugins ({len(snapshot.skipped)} skipped)")
        return snapshot

    def _process_entry(self, archive: DistributionArchive, entry: PackageEntry,
                       scratch_dir: Path) -> Optional[ResolvedPluginInfo]:
        """Read a plugin package, find the POM, get the source location and version."""
        self.logger.debug(f"Processing: {entry.name}")
        package_path = archive.extract(entry, scratch_dir)

        pom = extract_descriptor(package_path, self.config.descriptor_name)
        if pom is None:
            self.logger.debug(f"NO DESCRIPTOR FOR: {entry.name}")
            return None

        descriptor = parse_descriptor(pom)
        require_usable(descriptor)

        version = descriptor.effective_version
        connection = substitute_placeholders(descriptor, descriptor.scm_connection)
        self.logger.debug(
            f"Version: {version}, SCM Connection: {connection}, SCM Developer Connection: "
            f"{substitute_placeholders(descriptor, descriptor.scm_developer_connection)}"
        )
        if not connection or not connection.strip():
            raise MissingScmError(f"empty scm connection for {descriptor.artifact_id}")

        repo_dir = self.fetcher.ensure_cloned(connection, scratch_dir)
        resolved = self.resolver.resolve(repo_dir, version)

        # Identity comes from the bundled descriptor; the one at the commit may
        # belong to another module when several plugins share a repository
        return ResolvedPluginInfo(
            descriptor=descriptor,
            repo_work_dir=repo_dir,
            commit_id=resolved.commit_id,
            version=version,
        )

    def _log_skip(self, entry: PackageEntry, error: PluginSkipped) -> None:
        message = f"SKIPPED {entry.name} [{error.reason.value}]: {error}"
        if error.reason in _INFO_SKIPS:
            self.logger.info(message)
        else:
            self.logger.debug(message)
