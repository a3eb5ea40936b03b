"""
Reconciliation of two snapshots and per-plugin diff generation.
"""

import logging
from typing import Dict, Optional

from shared.logging_config import get_tool_logger
from shared.models import Classification, PluginDiff, ResolvedPluginInfo, Snapshot
from .errors import DiffGenerationError, ScmCommandError

DEFAULT_BASELINE_BRANCH = "plugin-diff-empty-baseline"


def classify(old_snapshot: Snapshot, new_snapshot: Snapshot) -> Classification:
    """
    Split the new snapshot into new and updated plugins.

    A plugin whose artifactId is in the old snapshot is "updated" even when
    nothing changed; filtering same-commit pairs is left to the reporter.
    Plugins only present in the old snapshot appear in neither list.
    """
    previous: Dict[str, ResolvedPluginInfo] = {info.artifact_id: info for info in old_snapshot}

    result = Classification()
    for info in new_snapshot:
        prior = previous.get(info.artifact_id)
        if prior is None:
            result.new_plugins.append(PluginDiff(from_info=None, to_info=info))
        else:
            result.updated_plugins.append(PluginDiff(from_info=prior, to_info=info))
    return result


def suppress_deletions(diff_text: str) -> str:
    """
    Drop removed lines from a unified diff, keeping the ``---`` file headers.

    Removed lines are dropped rather than blanked, so hunks read as plain
    additions. A ``---`` line is a header only between ``diff --git`` and the
    first ``@@`` hunk of that file; inside a hunk it is a removed line whose
    content starts with ``--``.
    """
    kept = []
    in_header = False
    for line in diff_text.splitlines():
        if line.startswith("diff --git "):
            in_header = True
        elif line.startswith("@@"):
            in_header = False
        elif line.startswith("-") and not (in_header and line.startswith("--- ")):
            continue
        kept.append(line)
    return "\n".join(kept)


class DiffGenerator:
    """
    Produces the source diff for a PluginDiff.

    Updated plugins diff ``from..to`` inside the new version's clone. New
    plugins have no prior commit, so they are diffed against a repo-local
    branch holding a single empty commit, which yields every file at the
    target commit as an addition.
    """

    def __init__(self, scm, baseline_branch: str = DEFAULT_BASELINE_BRANCH,
                 additions_only: bool = False, logger: Optional[logging.Logger] = None):
        self.scm = scm
        self.baseline_branch = baseline_branch
        self.additions_only = additions_only
        self.logger = logger or get_tool_logger("diff_generator")

    def generate(self, plugin_diff: PluginDiff) -> str:
        """
        Raises:
            DiffGenerationError: any git failure for this plugin
        """
        to_info = plugin_diff.to_info
        repo_dir = to_info.repo_work_dir
        try:
            if plugin_diff.is_new:
                from_rev = self.scm.make_empty_baseline(repo_dir, self.baseline_branch)
            else:
                from_rev = plugin_diff.from_info.commit_id
            text = self.scm.diff(repo_dir, from_rev, to_info.commit_id)
        except ScmCommandError as e:
            raise DiffGenerationError(f"Cannot diff {to_info.artifact_id}: {e}") from e

        if self.additions_only:
            text = suppress_deletions(text)
        return text
