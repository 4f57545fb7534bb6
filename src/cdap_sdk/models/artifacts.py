from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ArtifactDescriptor(BaseModel):
    """Declared local artifact. Every attribute forces replacement."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    namespace: str = Field(min_length=1)
    version: str = Field(min_length=1)
    jar_binary_path: str = Field(min_length=1)
    json_config_path: str = Field(min_length=1)

    @classmethod
    def from_attributes(
        cls, attrs: Mapping[str, Any], default_namespace: str
    ) -> "ArtifactDescriptor":
        values = dict(attrs)
        if not values.get("namespace"):
            values["namespace"] = default_namespace
        return cls(**values)

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.name}"


class ArtifactConfig(BaseModel):
    """Decoded json config of an artifact"""

    properties: Dict[str, str] = Field(default_factory=dict)
    parents: List[str] = Field(default_factory=list)

    @field_validator("properties", "parents", mode="before")
    @classmethod
    def _null_is_absent(cls, v, info):
        if v is None:
            return {} if info.field_name == "properties" else []
        return v

    @property
    def extends_header(self) -> str:
        # value of the Artifact-Extends header
        return "/".join(self.parents)


class ArtifactPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    config: ArtifactConfig
    jar: bytes


class ArtifactSummary(BaseModel):
    """One entry of the registry artifact listing"""

    model_config = ConfigDict(extra="ignore")

    name: str
    version: Optional[str] = None
    scope: Optional[str] = None
