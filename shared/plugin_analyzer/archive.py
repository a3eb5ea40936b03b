"""
Distribution archive scanning.

A Jenkins WAR bundles plugins as ``.hpi``/``.jpi`` files under
``WEB-INF/plugins/`` and ``WEB-INF/optional-plugins/``. Each plugin package
is itself a zip that embeds its ``pom.xml`` below ``META-INF/maven/``.
"""

import io
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Union

from .errors import ArchiveReadError

DEFAULT_PREFIXES = ("plugins/", "optional-plugins/")
DEFAULT_EXTENSIONS = (".hpi", ".jpi")
WEB_APP_ROOT = "WEB-INF/"


@dataclass(frozen=True)
class PackageEntry:
    """A plugin package inside a distribution archive."""
    name: str
    size: int

    @property
    def file_name(self) -> str:
        return PurePosixPath(self.name).name


def _matches(name: str, prefixes: Iterable[str], extensions: Iterable[str]) -> bool:
    relative = name[len(WEB_APP_ROOT):] if name.startswith(WEB_APP_ROOT) else name
    return (any(relative.startswith(prefix) for prefix in prefixes)
            and any(name.endswith(ext) for ext in extensions))


class DistributionArchive:
    """Read-only view over a distribution archive (WAR)."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        try:
            self._zip = zipfile.ZipFile(self.path)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveReadError(f"Cannot open distribution archive {self.path}: {e}") from e

    def __enter__(self) -> "DistributionArchive":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def list_packages(self, prefixes: Iterable[str] = DEFAULT_PREFIXES,
                      extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> List[PackageEntry]:
        prefixes, extensions = tuple(prefixes), tuple(extensions)
        return [
            PackageEntry(name=info.filename, size=info.file_size)
            for info in self._zip.infolist()
            if not info.is_dir() and _matches(info.filename, prefixes, extensions)
        ]

    def read(self, entry: PackageEntry) -> bytes:
        try:
            return self._zip.read(entry.name)
        except (OSError, zipfile.BadZipFile, KeyError) as e:
            raise ArchiveReadError(f"Cannot read {entry.name} from {self.path}: {e}") from e

    def extract(self, entry: PackageEntry, work_dir: Path) -> Path:
        """Copy a plugin package into the working directory and return its path."""
        work_dir.mkdir(parents=True, exist_ok=True)
        target = work_dir / entry.file_name
        target.write_bytes(self.read(entry))
        return target


def list_packages(archive_path: Union[str, Path],
                  prefixes: Iterable[str] = DEFAULT_PREFIXES,
                  extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> List[PackageEntry]:
    """List plugin packages in a distribution archive."""
    with DistributionArchive(archive_path) as archive:
        return archive.list_packages(prefixes, extensions)


def extract_descriptor(package: Union[bytes, Path], descriptor_name: str = "pom.xml") -> Optional[bytes]:
    """
    Find the embedded descriptor of a plugin package.

    Args:
        package: Package content or path to the package file
        descriptor_name: File name of the descriptor inside the package

    Returns:
        Descriptor bytes, or None when the package has none or is not a readable zip
    """
    source = io.BytesIO(package) if isinstance(package, (bytes, bytearray)) else package
    try:
        with zipfile.ZipFile(source) as z:
            for info in z.infolist():
                if info.is_dir():
                    continue
                if PurePosixPath(info.filename).name == descriptor_name:
                    return z.read(info.filename)
    except (OSError, RuntimeError, zipfile.BadZipFile, zlib.error):
        return None
    return None
