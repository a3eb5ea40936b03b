"""Local clones of plugin source repositories under the scratch directory."""

import logging
import re
import shutil
from pathlib import Path
from typing import Dict, Iterable, Optional

from shared.logging_config import get_tool_logger
from .errors import RepositoryUnavailableError, ScmCommandError

DEFAULT_SCM_PREFIXES = ("scm:git:",)


def normalize_connection(connection: str, prefixes: Iterable[str] = DEFAULT_SCM_PREFIXES) -> str:
    """Strip the SCM provider tag (``scm:git:``) from a connection string."""
    value = connection.strip()
    for prefix in prefixes:
        if value.startswith(prefix):
            return value[len(prefix):]
    return value


def repository_name(url: str) -> str:
    """
    Derive the local directory name from a repository URL.

    Example: https://github.com/jenkinsci/git-plugin.git -> git-plugin
    """
    name = re.split(r"[/:]", url.rstrip("/"))[-1]
    if name.endswith(".git"):
        name = name[:-4]
    if not name or name in (".", ".."):
        raise RepositoryUnavailableError(f"Cannot derive a repository name from: {url}")
    return name


def setup_git_auth(repo_url: str, token: Optional[str] = None,
                   username: Optional[str] = None, password: Optional[str] = None) -> str:
    """Inject credentials into an https URL when any are configured."""
    if not repo_url.startswith('https://'):
        return repo_url
    if token:
        return repo_url.replace('https://', f'https://oauth2:{token}@', 1)
    if username and password:
        return repo_url.replace('https://', f'https://{username}:{password}@', 1)
    return repo_url


class RepositoryFetcher:
    """
    Ensures a clone exists for each plugin's source repository.

    A clone is attempted at most once per connection string per run. An
    existing directory named after the repository counts as a cache hit even
    if it was left behind by an unrelated or interrupted run.
    """

    def __init__(self, scm, scm_prefixes: Iterable[str] = DEFAULT_SCM_PREFIXES,
                 token: Optional[str] = None, username: Optional[str] = None,
                 password: Optional[str] = None, logger: Optional[logging.Logger] = None):
        self.scm = scm
        self.scm_prefixes = tuple(scm_prefixes)
        self.token = token
        self.username = username
        self.password = password
        self.logger = logger or get_tool_logger("fetcher")
        self._attempts: Dict[str, Optional[Path]] = {}

    def ensure_cloned(self, connection: str, scratch_dir: Path) -> Path:
        """
        Return the local clone for a repository connection, cloning if needed.

        Args:
            connection: SCM connection string, placeholders already substituted
            scratch_dir: Directory holding all clones of this run

        Returns:
            Path of the local clone

        Raises:
            RepositoryUnavailableError: clone failed now or earlier in this run
        """
        url = normalize_connection(connection, self.scm_prefixes)
        if connection in self._attempts:
            cached = self._attempts[connection]
            if cached is None:
                raise RepositoryUnavailableError(f"No repository for: {url}")
            return cached

        try:
            repo_dir = Path(scratch_dir) / repository_name(url)
        except RepositoryUnavailableError:
            self._attempts[connection] = None
            raise

        if repo_dir.is_dir():
            self.logger.debug(f"Reusing existing clone: {repo_dir}")
        else:
            auth_url = setup_git_auth(url, self.token, self.username, self.password)
            try:
                self.scm.clone(auth_url, Path(scratch_dir), repo_dir.name)
            except ScmCommandError as e:
                self.logger.debug(f"Clone of {url} failed: {e}")
                self._attempts[connection] = None
                # A killed or failed clone can leave a partial checkout behind
                shutil.rmtree(repo_dir, ignore_errors=True)
                raise RepositoryUnavailableError(f"No repository for: {url}") from e

        if not repo_dir.is_dir():
            self._attempts[connection] = None
            raise RepositoryUnavailableError(f"No repository for: {url}")

        self.logger.debug(f"RepoDir: {repo_dir.resolve()}")
        self._attempts[connection] = repo_dir
        return repo_dir
