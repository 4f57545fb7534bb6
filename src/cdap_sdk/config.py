import os
from typing import Dict, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from .client.artifacts import ArtifactClient
from .exceptions import DecodeError

DEFAULT_HOST = "http://localhost:11015"
DEFAULT_NAMESPACE = "default"


class RegistryConfig(BaseModel):
    """Where the registry lives and which namespace undeclared artifacts go to"""

    host: str = DEFAULT_HOST
    default_namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1)
    timeout: float = Field(default=600.0, gt=0)
    extra_headers: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides) -> "RegistryConfig":
        values = {
            "host": os.getenv("CDAP_HOST", DEFAULT_HOST),
            "default_namespace": os.getenv("CDAP_NAMESPACE", DEFAULT_NAMESPACE),
            "timeout": os.getenv("CDAP_TIMEOUT", "600"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            errors = e.errors(include_url=False)
            fields = ", ".join(str(err["loc"][0]) for err in errors if err["loc"])
            raise DecodeError(
                f"Invalid registry configuration ({fields}): {errors[0]['msg']}",
                detail={"errors": errors},
            ) from e

    def build_client(self, client: Optional[httpx.Client] = None) -> ArtifactClient:
        return ArtifactClient(
            self.host,
            timeout=self.timeout,
            extra_headers=self.extra_headers,
            client=client,
        )
