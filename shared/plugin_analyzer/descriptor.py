"""
Descriptor parsing for plugin build metadata.

A plugin package embeds the Maven ``pom.xml`` it was built from. Only the
handful of coordinates needed to locate and pin the plugin sources are
read: artifactId, groupId, version, the parent's version/groupId and the
``<scm>`` connections. Lookups are namespace-agnostic so POMs with and
without the Maven namespace parse the same way.
"""

import xml.etree.ElementTree as ET
from typing import Optional, Union

from shared.models import Descriptor
from .errors import DescriptorParseError, MissingScmError, MissingVersionError

PLACEHOLDER_ARTIFACT_ID = "${project.artifactId}"
PLACEHOLDER_GROUP_ID = "${project.groupId}"
PLACEHOLDER_VERSION = "${project.version}"


def _child_text(node: Optional[ET.Element], tag: str) -> Optional[str]:
    if node is None:
        return None
    child = node.find(f"{{*}}{tag}")
    if child is None or child.text is None:
        return None
    text = child.text.strip()
    return text or None


def parse_descriptor(data: Union[bytes, str]) -> Descriptor:
    """
    Parse descriptor content into a Descriptor.

    Args:
        data: Raw pom.xml content

    Returns:
        The parsed Descriptor

    Raises:
        DescriptorParseError: content is not XML, is not a project, or has no artifactId
    """
    if not data or not data.strip():
        raise DescriptorParseError("empty descriptor")
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise DescriptorParseError(f"malformed descriptor: {e}") from e

    if root.tag.split("}")[-1] != "project":
        raise DescriptorParseError(f"unexpected root element: {root.tag}")

    artifact_id = _child_text(root, "artifactId")
    if artifact_id is None:
        raise DescriptorParseError("descriptor has no artifactId")

    parent = root.find("{*}parent")
    scm = root.find("{*}scm")

    return Descriptor(
        artifact_id=artifact_id,
        group_id=_child_text(root, "groupId"),
        own_version=_child_text(root, "version"),
        parent_version=_child_text(parent, "version"),
        parent_group_id=_child_text(parent, "groupId"),
        scm_connection=_child_text(scm, "connection"),
        scm_developer_connection=_child_text(scm, "developerConnection"),
        scm_url=_child_text(scm, "url"),
    )


def effective_version(descriptor: Descriptor) -> Optional[str]:
    """Get a version from the plugin or its parent."""
    return descriptor.effective_version


def substitute_placeholders(descriptor: Descriptor, raw: Optional[str]) -> Optional[str]:
    """
    Replace the self-referential ``${project.*}`` tokens in a descriptor value.

    Tokens whose value is unknown are left untouched.
    """
    if raw is None:
        return None
    value = raw
    value = value.replace(PLACEHOLDER_ARTIFACT_ID, descriptor.artifact_id)
    if descriptor.effective_group_id is not None:
        value = value.replace(PLACEHOLDER_GROUP_ID, descriptor.effective_group_id)
    if descriptor.effective_version is not None:
        value = value.replace(PLACEHOLDER_VERSION, descriptor.effective_version)
    return value


def require_usable(descriptor: Descriptor) -> None:
    """
    Check that a parsed descriptor carries enough to be tracked.

    Raises:
        MissingVersionError: neither own nor parent version
        MissingScmError: no repository connection
    """
    if descriptor.effective_version is None:
        raise MissingVersionError(f"no version for {descriptor.artifact_id}")
    if descriptor.scm_connection is None:
        hint = f" (scm url: {descriptor.scm_url})" if descriptor.scm_url else ""
        raise MissingScmError(f"no scm connection for {descriptor.artifact_id}{hint}")
