"""
Diff Reporter

Writes the comparison report: a summary of new and updated plugins with
their versions and commits, followed (optionally) by the source diff of
each one. All sinks receive exactly the same lines.
"""

import logging
from typing import Dict, List, Optional, Sequence

from shared.logging_config import get_worker_logger
from shared.models import PluginDiff, ResolvedPluginInfo, SkipReason, Snapshot
from shared.plugin_analyzer import DiffGenerationError, DiffGenerator
from shared.sinks import MultiSink, Sink

logger = get_worker_logger("diff_reporter")


def format_new(diff: PluginDiff) -> str:
    to = diff.to_info
    return f"{to.artifact_id} {to.version} ({to.commit_id})"


def format_updated(diff: PluginDiff) -> str:
    to, prior = diff.to_info, diff.from_info
    return f"{to.artifact_id} {prior.version} ({prior.commit_id}) -> {to.version} ({to.commit_id})"


def format_listed(info: ResolvedPluginInfo) -> str:
    return f"{info.artifact_id}@{info.version} - {info.commit_id} @ {info.repo_work_dir.resolve()}"


class DiffReporter:
    """Formats classification results and streams diff bodies to sinks."""

    def __init__(self, diff_generator: DiffGenerator, hide_unchanged: bool = False,
                 log: Optional[logging.Logger] = None):
        self.diff_generator = diff_generator
        self.hide_unchanged = hide_unchanged
        self.logger = log or logger

    def report(self, new_plugins: Sequence[PluginDiff], updated_plugins: Sequence[PluginDiff],
               sinks: Sequence[Sink], include_diff_bodies: bool = True,
               skipped: Optional[Dict[str, SkipReason]] = None) -> List[str]:
        """
        Write the summary and, if requested, every diff body.

        Args:
            new_plugins: Plugins without a previous version
            updated_plugins: Plugins present in both snapshots
            sinks: Destinations; each receives identical output
            include_diff_bodies: Stream source diffs after the summary
            skipped: Optional package entries that were skipped, with reasons

        Returns:
            artifactIds whose diff could not be generated
        """
        out = MultiSink(*sinks)
        updated = [d for d in updated_plugins if not (self.hide_unchanged and d.is_unchanged)]

        out.write_line()
        out.write_line("New plugins: ")
        for diff in new_plugins:
            out.write_line(format_new(diff))

        out.write_line()
        out.write_line("Updated plugins: ")
        for diff in updated:
            out.write_line(format_updated(diff))

        if skipped:
            out.write_line()
            out.write_line("Skipped plugins: ")
            for entry_name in sorted(skipped):
                out.write_line(f"{entry_name} [{skipped[entry_name].value}]")

        failures: List[str] = []
        if not include_diff_bodies:
            return failures

        for diff, title in [(d, format_new(d)) for d in new_plugins] + [(d, format_updated(d)) for d in updated]:
            try:
                body = self.diff_generator.generate(diff)
            except DiffGenerationError as e:
                self.logger.warning(f"⚠️ Diff omitted for {diff.artifact_id}: {e}")
                failures.append(diff.artifact_id)
                continue
            out.write_line()
            out.write_line(f"=== {title} ===")
            out.write_text(body)

        return failures

    def list_plugins(self, snapshot: Snapshot, sinks: Sequence[Sink]) -> None:
        """Print every plugin of a single snapshot."""
        out = MultiSink(*sinks)
        out.write_line()
        out.write_line("Plugins: ")
        for info in snapshot:
            out.write_line(format_listed(info))
        if snapshot.skipped:
            out.write_line()
            out.write_line("Skipped plugins: ")
            for entry_name in sorted(snapshot.skipped):
                out.write_line(f"{entry_name} [{snapshot.skipped[entry_name].value}]")
