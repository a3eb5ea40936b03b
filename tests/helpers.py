"""Builders for POMs, plugin packages, WARs and plugin git repositories used by the tests."""

import io
import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import git
from git import Actor

AUTHOR = Actor("Plugin Dev", "dev@example.com")

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"


def make_pom(artifact_id: Optional[str] = "demo-plugin",
             version: Optional[str] = "1.0",
             parent_version: Optional[str] = None,
             group_id: Optional[str] = None,
             connection: Optional[str] = None,
             developer_connection: Optional[str] = None,
             namespaced: bool = True) -> str:
    """Render a minimal pom.xml."""
    parts = []
    if parent_version is not None:
        parts.append(
            "<parent><groupId>org.jenkins-ci.plugins</groupId><artifactId>plugin</artifactId>"
            f"<version>{parent_version}</version></parent>"
        )
    if group_id is not None:
        parts.append(f"<groupId>{group_id}</groupId>")
    if artifact_id is not None:
        parts.append(f"<artifactId>{artifact_id}</artifactId>")
    if version is not None:
        parts.append(f"<version>{version}</version>")
    if connection is not None or developer_connection is not None:
        scm = "<scm>"
        if connection is not None:
            scm += f"<connection>{connection}</connection>"
        if developer_connection is not None:
            scm += f"<developerConnection>{developer_connection}</developerConnection>"
        scm += "</scm>"
        parts.append(scm)
    xmlns = f' xmlns="{POM_NAMESPACE}"' if namespaced else ""
    body = "\n  ".join(parts)
    return f'<?xml version="1.0" encoding="UTF-8"?>\n<project{xmlns}>\n  {body}\n</project>\n'


def make_hpi(pom: Optional[str], artifact_id: str = "demo-plugin",
             group_id: str = "org.jenkins-ci.plugins") -> bytes:
    """Build a plugin package, optionally embedding ``pom``."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as z:
        z.writestr("META-INF/MANIFEST.MF", f"Manifest-Version: 1.0\nShort-Name: {artifact_id}\n")
        if pom is not None:
            z.writestr(f"META-INF/maven/{group_id}/{artifact_id}/pom.xml", pom)
            z.writestr(f"META-INF/maven/{group_id}/{artifact_id}/pom.properties", "version=unused\n")
        z.writestr("WEB-INF/lib/classes.jar", b"not really a jar")
    return buffer.getvalue()


def make_war(path: Path, packages: Dict[str, bytes]) -> Path:
    """Write a WAR whose entries are ``packages`` (archive path -> bytes) plus some noise."""
    with zipfile.ZipFile(path, "w") as z:
        z.writestr("index.jsp", "<html/>")
        z.writestr("WEB-INF/web.xml", "<web-app/>")
        z.writestr("WEB-INF/lib/jenkins-core.jar", b"core")
        for name, data in packages.items():
            z.writestr(name, data)
    return path


class PluginRepo:
    """A plugin source repository with a scripted pom.xml history."""

    def __init__(self, path: Path):
        self.path = path
        self.path.mkdir(parents=True, exist_ok=True)
        self.repo = git.Repo.init(str(path))

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def connection(self) -> str:
        return f"scm:git:file://{self.path}"

    def commit_files(self, files: Dict[str, Union[str, bytes]], message: str = "change") -> str:
        for rel, content in files.items():
            target = self.path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        self.repo.index.add(list(files))
        commit = self.repo.index.commit(message, author=AUTHOR, committer=AUTHOR)
        return commit.hexsha

    def commit_pom(self, version: Optional[str], extra: Optional[Dict[str, Union[str, bytes]]] = None,
                   raw_pom: Optional[str] = None, **pom_kwargs) -> str:
        pom = raw_pom if raw_pom is not None else make_pom(
            artifact_id=self.name, version=version, connection=self.connection, **pom_kwargs
        )
        files = {"pom.xml": pom}
        files.update(extra or {})
        return self.commit_files(files, message=f"release {version}")

    def pom_at_head(self) -> str:
        return (self.path / "pom.xml").read_text(encoding="utf-8")


class FakeScm:
    """In-memory SCM client: one repository whose descriptor history is scripted."""

    def __init__(self, history: List[Tuple[str, Optional[str]]]):
        # (commit id, pom content or None when the file is missing), newest first
        self.history = history
        self.shown: List[str] = []
        self.cloned: List[str] = []
        self.clone_succeeds = True
        self.diffs: Dict[Tuple[str, str], str] = {}
        self.baselines: List[Tuple[Path, str]] = []

    def clone(self, url: str, parent_dir: Path, name: str) -> Path:
        from shared.plugin_analyzer import ScmCommandError

        self.cloned.append(url)
        if not self.clone_succeeds:
            raise ScmCommandError(f"git clone failed for {url}")
        target = Path(parent_dir) / name
        target.mkdir(parents=True, exist_ok=True)
        return target

    def log_commits(self, repo_dir: Path, path: str) -> List[str]:
        return [commit_id for commit_id, _ in self.history]

    def show_file(self, repo_dir: Path, commit_id: str, path: str) -> Optional[bytes]:
        self.shown.append(commit_id)
        content = dict(self.history)[commit_id]
        return None if content is None else content.encode("utf-8")

    def diff(self, repo_dir: Path, from_rev: str, to_rev: str) -> str:
        from shared.plugin_analyzer import ScmCommandError

        if (from_rev, to_rev) not in self.diffs:
            raise ScmCommandError(f"bad revision {from_rev}..{to_rev}")
        return self.diffs[(from_rev, to_rev)]

    def make_empty_baseline(self, repo_dir: Path, branch: str) -> str:
        self.baselines.append((Path(repo_dir), branch))
        return "baseline"
