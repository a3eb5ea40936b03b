"""
Narrow git interface used by the fetcher, resolver and diff generator.

Only five operations are needed: clone, log of one file, show one file at a
revision, diff two revisions and create an empty baseline commit. Keeping
them behind GitScmClient means the resolver and reconciliation code never
touch GitPython directly and tests can pass any object with the same methods.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from shared.logging_config import get_tool_logger
from .errors import ScmCommandError

EMPTY_BASELINE_MESSAGE = "Empty"

_CREDENTIALS = re.compile(r"(://)[^/@\s]+@")


def redact_credentials(text: str) -> str:
    """Mask user:password@ / token@ parts of URLs."""
    return _CREDENTIALS.sub(r"\1***@", text)


class GitScmClient:
    """
    git operations backed by GitPython.

    Every command runs synchronously; ``timeout`` (seconds) is handed to
    GitPython as ``kill_after_timeout`` and None means no limit.
    """

    def __init__(self, timeout: Optional[float] = None,
                 user_name: str = "plugin-diff",
                 user_email: str = "plugin-diff@localhost",
                 logger: Optional[logging.Logger] = None):
        self.timeout = timeout
        self.user_name = user_name
        self.user_email = user_email
        self.logger = logger or get_tool_logger("scm")

    def _repo(self, repo_dir: Union[str, Path]) -> git.Repo:
        try:
            return git.Repo(str(repo_dir))
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise ScmCommandError(f"Not a git repository: {repo_dir}") from e

    def _failure(self, action: str, e: GitCommandError) -> ScmCommandError:
        stderr = redact_credentials(str(e.stderr or "").strip())
        return ScmCommandError(f"git {action} failed (status {e.status}): {stderr}")

    def clone(self, url: str, parent_dir: Path, name: str) -> Path:
        """Clone ``url`` into ``parent_dir/name``."""
        parent_dir.mkdir(parents=True, exist_ok=True)
        self.logger.debug(f"EXEC: git clone {redact_credentials(url)} {name}")
        try:
            git.Git(str(parent_dir)).clone(url, name, kill_after_timeout=self.timeout)
        except GitCommandError as e:
            raise self._failure("clone", e) from e
        return parent_dir / name

    def log_commits(self, repo_dir: Path, path: str) -> List[str]:
        """Commit ids touching ``path``, most recent first."""
        repo = self._repo(repo_dir)
        self.logger.debug(f"EXEC: git log --format=%H -- {path} @ {repo_dir}")
        try:
            output = repo.git.log("--format=%H", "--", path, kill_after_timeout=self.timeout)
        except GitCommandError as e:
            raise self._failure("log", e) from e
        return [line.strip() for line in output.splitlines() if line.strip()]

    def show_file(self, repo_dir: Path, commit_id: str, path: str) -> Optional[bytes]:
        """Content of ``path`` at ``commit_id``, or None if it does not exist there."""
        repo = self._repo(repo_dir)
        try:
            return repo.git.show(f"{commit_id}:{path}", stdout_as_string=False,
                                 kill_after_timeout=self.timeout)
        except GitCommandError as e:
            self.logger.debug(f"git show {commit_id}:{path} failed with status {e.status}")
            return None

    def diff(self, repo_dir: Path, from_rev: str, to_rev: str) -> str:
        """
        Unified diff between two revisions.

        Plugin sources are not always UTF-8 (Latin-1 message bundles are
        common), so undecodable bytes become U+FFFD instead of surrogates.
        """
        repo = self._repo(repo_dir)
        self.logger.debug(f"EXEC: git diff {from_rev}..{to_rev} @ {repo_dir}")
        try:
            output = repo.git.diff(f"{from_rev}..{to_rev}", stdout_as_string=False,
                                   kill_after_timeout=self.timeout)
        except GitCommandError as e:
            raise self._failure("diff", e) from e
        return output.decode("utf-8", errors="replace")

    def make_empty_baseline(self, repo_dir: Path, branch: str) -> str:
        """
        Point ``branch`` at a parentless commit with an empty tree.

        An existing branch of that name is reused. HEAD, the index and the
        working tree are left alone.

        Returns:
            The baseline commit id
        """
        repo = self._repo(repo_dir)
        for head in repo.heads:
            if head.name == branch:
                return head.commit.hexsha

        self.logger.debug(f"Creating empty baseline branch '{branch}' in {repo_dir}")
        try:
            # mktree with no input writes the empty tree
            empty_tree = repo.git.mktree(kill_after_timeout=self.timeout)
            with repo.git.custom_environment(
                GIT_AUTHOR_NAME=self.user_name,
                GIT_AUTHOR_EMAIL=self.user_email,
                GIT_COMMITTER_NAME=self.user_name,
                GIT_COMMITTER_EMAIL=self.user_email,
            ):
                commit_id = repo.git.commit_tree("--no-gpg-sign", "-m", EMPTY_BASELINE_MESSAGE, empty_tree,
                                                 kill_after_timeout=self.timeout)
            repo.git.update_ref(f"refs/heads/{branch}", commit_id, kill_after_timeout=self.timeout)
        except GitCommandError as e:
            raise self._failure("empty baseline", e) from e
        return commit_id.strip()
