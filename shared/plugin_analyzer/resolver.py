"""
Version-to-commit resolution.

Walks the history of a plugin's descriptor, newest first, and returns the
first commit whose descriptor declares exactly the requested version. Versions
are compared as plain strings: ``2.0`` does not match ``2.0.0`` or ``v2.0``.
"""

import logging
from pathlib import Path
from typing import Optional

from shared.logging_config import get_tool_logger
from shared.models import ResolvedCommit
from .descriptor import parse_descriptor
from .errors import CommitNotFoundError, DescriptorParseError, ScmCommandError


class CommitResolver:
    """Find the commit that produced a given plugin version."""

    def __init__(self, scm, descriptor_path: str = "pom.xml", logger: Optional[logging.Logger] = None):
        self.scm = scm
        self.descriptor_path = descriptor_path
        self.logger = logger or get_tool_logger("resolver")

    def resolve(self, repo_dir: Path, target_version: str) -> ResolvedCommit:
        """
        Resolve ``target_version`` to a commit of the repository at ``repo_dir``.

        Only commits touching the descriptor are inspected. A revision whose
        descriptor is missing or unparsable is skipped with a warning. When the
        same version occurs more than once in history the most recent commit
        wins.

        Raises:
            CommitNotFoundError: history exhausted without an exact match
        """
        try:
            commit_ids = self.scm.log_commits(repo_dir, self.descriptor_path)
        except ScmCommandError as e:
            raise CommitNotFoundError(f"Cannot read history of {self.descriptor_path} in {repo_dir}: {e}") from e

        for commit_id in commit_ids:
            content = self.scm.show_file(repo_dir, commit_id, self.descriptor_path)
            if content is None:
                self.logger.warning(f"WARNING, NO {self.descriptor_path} FOR: {repo_dir}@{commit_id}")
                continue
            try:
                descriptor = parse_descriptor(content)
            except DescriptorParseError as e:
                self.logger.warning(f"WARNING, ERROR PARSING {self.descriptor_path} FOR: {repo_dir}@{commit_id}: {e}")
                continue

            if descriptor.effective_version == target_version:
                self.logger.debug(f"Found version {target_version} at: {commit_id}")
                return ResolvedCommit(commit_id=commit_id, descriptor=descriptor)

        raise CommitNotFoundError(
            f"No commit of {self.descriptor_path} in {repo_dir} declares version {target_version} "
            f"({len(commit_ids)} commits searched)"
        )
