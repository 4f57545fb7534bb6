"""
Local artifact resource: a jar on disk plus its json config, registered in a
namespace of the registry.

The driver (see ``cdap_sdk.apply``) owns scheduling, diffing and persisted
state; this module only implements the create/read/delete/exists callbacks.
There is no update: every attribute forces a delete followed by a create.
"""
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel

from ..client.artifacts import ArtifactClient
from ..loader import init_artifact_data
from ..models.artifacts import ArtifactDescriptor

logger = logging.getLogger(__name__)


class AttributeSchema(BaseModel):
    required: bool = False
    force_new: bool = True
    description: str = ""


SCHEMA: Dict[str, AttributeSchema] = {
    "name": AttributeSchema(required=True, description="The name of the artifact."),
    "namespace": AttributeSchema(
        description=(
            "The namespace the artifact belongs to. "
            "If not provided, the default namespace is used."
        ),
    ),
    # The registry could infer the version from the jar manifest, but other
    # calls (properties, delete) need it, so it is declared explicitly.
    "version": AttributeSchema(
        required=True,
        description="The version of the artifact. Must match the version in the JAR manifest.",
    ),
    "jar_binary_path": AttributeSchema(
        required=True, description="The path to the JAR binary for the artifact."
    ),
    "json_config_path": AttributeSchema(
        required=True, description="The path to the JSON config of the artifact."
    ),
}


class ResourceData:
    """Declared attributes of one resource plus the id recorded after create"""

    def __init__(self, attributes: Mapping[str, Any], id: Optional[str] = None):
        self.attributes = dict(attributes)
        self.id = id

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def set_id(self, value: Optional[str]) -> None:
        self.id = value

    def __repr__(self) -> str:
        return f"ResourceData(id={self.id!r}, attributes={self.attributes!r})"


class LocalArtifactResource:
    schema = SCHEMA

    def __init__(self, client: ArtifactClient, default_namespace: str):
        self.client = client
        self.default_namespace = default_namespace

    def descriptor(self, data: ResourceData) -> ArtifactDescriptor:
        return ArtifactDescriptor.from_attributes(
            {k: data.get(k) for k in self.schema if data.get(k) is not None},
            self.default_namespace,
        )

    def create(
        self,
        data: ResourceData,
        on_uploaded: Optional[Callable[[str], None]] = None,
    ) -> str:
        # Uploading the same name+version twice is not an error on the
        # registry side, so a failure while setting properties needs no
        # partial state: re-running create redoes both steps.
        desc = self.descriptor(data)
        payload = init_artifact_data(desc)
        logger.info(f"Creating artifact {desc.key}:{desc.version}")
        self.client.upload_jar(desc.namespace, payload)
        if on_uploaded is not None:
            on_uploaded(payload.name)
        self.client.upload_properties(desc.namespace, payload)
        data.set_id(payload.name)
        return payload.name

    def read(self, data: ResourceData) -> None:
        # Drift of the remote jar or properties is not tracked.
        return None

    def delete(self, data: ResourceData) -> None:
        desc = self.descriptor(data)
        logger.info(f"Deleting artifact {desc.key}:{desc.version}")
        self.client.delete_artifact(desc.namespace, desc.name, desc.version)

    def exists(self, data: ResourceData) -> bool:
        """
        True when any version of the artifact name is listed in the namespace.

        The version is deliberately not compared: another version under the
        same name counts as existing.
        """
        namespace = data.get("namespace") or self.default_namespace
        name = data.get("name")
        artifacts = self.client.list_artifacts(namespace)
        return any(a.name == name for a in artifacts)

    def diff(self, old: Mapping[str, Any], new: Mapping[str, Any]) -> List[str]:
        """Attributes whose change forces replacement, in schema order."""
        old_desc = ArtifactDescriptor.from_attributes(old, self.default_namespace)
        new_desc = ArtifactDescriptor.from_attributes(new, self.default_namespace)
        return [
            key
            for key, attr in self.schema.items()
            if attr.force_new and getattr(old_desc, key) != getattr(new_desc, key)
        ]
