"""
Supervisor
Orchestrates a plugin release comparison.

This worker:
1. Prepares the scratch directory shared by all clones of the run
2. Runs the Snapshot Collector on the new archive (and the previous one)
3. Lists the plugins (list mode) or classifies them into new / updated
4. Drives the Diff Reporter to stdout and the report file (compare mode)
"""

import logging
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from shared.config import Config
from shared.logging_config import get_worker_logger
from shared.models import ComparisonResult
from shared.plugin_analyzer import DiffGenerator, GitScmClient, classify
from shared.sinks import ConsoleSink, FileSink, Sink
from Workers.diff_reporter.diff_reporter import DiffReporter
from Workers.snapshot_collector.snapshot_collector import SnapshotCollector

logger = get_worker_logger("supervisor")


def prepare_scratch_dir(config: Config) -> Path:
    """Use the configured scratch directory or create a fresh one for this run."""
    if config.scratch_dir:
        path = Path(config.scratch_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path
    return Path(tempfile.mkdtemp(prefix="jenkins_plugin_diff"))


def run_comparison(config: Config, new_archive: Path,
                   previous_archive: Optional[Path] = None,
                   console: Optional[Sink] = None,
                   scm=None,
                   log: Optional[logging.Logger] = None) -> ComparisonResult:
    """
    List the plugins of ``new_archive`` or compare it with ``previous_archive``.

    Args:
        config: Run configuration
        new_archive: Distribution archive to inspect
        previous_archive: Optional earlier archive; switches to compare mode
        console: Sink for console output (stdout by default)
        scm: Optional SCM client replacing GitScmClient

    Returns:
        ComparisonResult summarising the run

    Raises:
        ArchiveReadError: either archive cannot be read
    """
    log = log or logger
    start_time = datetime.now()
    console = console or ConsoleSink()
    scratch_dir = prepare_scratch_dir(config)
    new_archive = Path(new_archive)

    scm = scm or GitScmClient(
        timeout=config.git_timeout_seconds,
        user_name=config.git_user_name,
        user_email=config.git_user_email,
    )
    collector = SnapshotCollector(config, scm=scm)
    reporter = DiffReporter(
        DiffGenerator(scm, baseline_branch=config.baseline_branch, additions_only=config.additions_only),
        hide_unchanged=config.hide_unchanged,
    )

    log.info(f"Scratch directory: {scratch_dir}")

    if previous_archive is None:
        console.write_line(f"Listing plugins for: {new_archive}")
        snapshot = collector.collect(new_archive, scratch_dir)
        reporter.list_plugins(snapshot, [console])
        log.info(f"Listing completed in {(datetime.now() - start_time).total_seconds():.1f}s")
        return ComparisonResult(
            mode="list",
            new_archive=new_archive,
            scratch_dir=scratch_dir,
            listed_plugins=snapshot.artifact_ids,
            skipped=snapshot.skipped,
        )

    previous_archive = Path(previous_archive)
    console.write_line(f"Comparing: {new_archive} with: {previous_archive}")

    # One snapshot at a time; the previous build's clones are reused when repositories match
    new_snapshot = collector.collect(new_archive, scratch_dir)
    old_snapshot = collector.collect(previous_archive, scratch_dir)

    for label, snapshot in (("NEW", new_snapshot), ("OLD", old_snapshot)):
        log.debug(f"{label} plugins: ")
        for info in snapshot:
            log.debug(f"{info.artifact_id}@{info.version} - {info.commit_id} @ {info.repo_work_dir.resolve()}")

    classification = classify(old_snapshot, new_snapshot)
    log.info(f"📊 New plugins: {len(classification.new_plugins)}, "
             f"updated plugins: {len(classification.updated_plugins)} "
             f"({len(classification.unchanged_plugins)} at the same commit)")

    report_file = scratch_dir / config.report_filename
    with FileSink(report_file) as file_sink:
        failures = reporter.report(
            classification.new_plugins,
            classification.updated_plugins,
            [console, file_sink],
            include_diff_bodies=config.include_diff_bodies,
            skipped=new_snapshot.skipped,
        )

    log.info(f"Comparison completed in {(datetime.now() - start_time).total_seconds():.1f}s")
    console.write_line(f"SEE: {report_file.resolve()}")

    return ComparisonResult(
        mode="compare",
        new_archive=new_archive,
        previous_archive=previous_archive,
        scratch_dir=scratch_dir,
        report_file=report_file.resolve(),
        listed_plugins=new_snapshot.artifact_ids,
        new_plugins=[d.artifact_id for d in classification.new_plugins],
        updated_plugins=[d.artifact_id for d in classification.updated_plugins],
        diff_failures=failures,
        skipped=new_snapshot.skipped,
    )
