"""
Plugin Analyzer Module
Resolves bundled plugin versions to source commits and diffs them.
"""

from .archive import (
    DistributionArchive,
    PackageEntry,
    list_packages,
    extract_descriptor,
)
from .descriptor import (
    parse_descriptor,
    effective_version,
    substitute_placeholders,
    require_usable,
)
from .errors import (
    PluginDiffError,
    ArchiveReadError,
    ScmCommandError,
    DiffGenerationError,
    PluginSkipped,
    DescriptorParseError,
    MissingVersionError,
    MissingScmError,
    RepositoryUnavailableError,
    CommitNotFoundError,
)
from .fetcher import (
    RepositoryFetcher,
    normalize_connection,
    repository_name,
)
from .reconcile import (
    DiffGenerator,
    classify,
    suppress_deletions,
)
from .resolver import CommitResolver
from .scm import GitScmClient

__all__ = [
    # Archive scanning
    'DistributionArchive',
    'PackageEntry',
    'list_packages',
    'extract_descriptor',

    # Descriptor model
    'parse_descriptor',
    'effective_version',
    'substitute_placeholders',
    'require_usable',

    # Errors
    'PluginDiffError',
    'ArchiveReadError',
    'ScmCommandError',
    'DiffGenerationError',
    'PluginSkipped',
    'DescriptorParseError',
    'MissingVersionError',
    'MissingScmError',
    'RepositoryUnavailableError',
    'CommitNotFoundError',

    # Repositories and history
    'GitScmClient',
    'RepositoryFetcher',
    'normalize_connection',
    'repository_name',
    'CommitResolver',

    # Reconciliation
    'classify',
    'DiffGenerator',
    'suppress_deletions',
]
