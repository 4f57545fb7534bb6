import json
import logging
from typing import Dict, List, Optional

import httpx
from pydantic import ValidationError

from ..exceptions import DecodeError
from ..models.artifacts import ArtifactPayload, ArtifactSummary
from .http_client import HttpClient, url_join

logger = logging.getLogger(__name__)


class ArtifactClient:
    """Artifact endpoints of the registry, under /v3/namespaces/{ns}/artifacts"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 600.0,
        extra_headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.http = HttpClient(
            base_url, timeout=timeout, extra_headers=extra_headers, client=client
        )

    @staticmethod
    def artifacts_path(namespace: str) -> str:
        return url_join("/v3/namespaces", namespace) + "/artifacts"

    def artifact_path(self, namespace: str, name: str) -> str:
        return url_join(self.artifacts_path(namespace), name)

    def version_path(self, namespace: str, name: str, version: str) -> str:
        return url_join(self.artifact_path(namespace, name) + "/versions", version)

    def upload_jar(self, namespace: str, payload: ArtifactPayload) -> None:
        # The registry accepts the same name+version more than once, so this
        # call is safe to repeat.
        self.http.request(
            "POST",
            self.artifact_path(namespace, payload.name),
            content=payload.jar,
            headers={
                "Artifact-Version": payload.version,
                "Artifact-Extends": payload.config.extends_header,
            },
        )
        logger.info(
            f"Uploaded jar for artifact {namespace}/{payload.name}:{payload.version}"
        )

    def upload_properties(self, namespace: str, payload: ArtifactPayload) -> None:
        """Attach properties to an uploaded version. Must run after upload_jar."""
        path = self.version_path(namespace, payload.name, payload.version) + "/properties"
        self.http.request("PUT", path, json=dict(payload.config.properties))
        logger.info(
            f"Set {len(payload.config.properties)} properties on "
            f"{namespace}/{payload.name}:{payload.version}"
        )

    def list_artifacts(self, namespace: str) -> List[ArtifactSummary]:
        body = self.http.request("GET", self.artifacts_path(namespace))
        try:
            data = json.loads(body)
        except ValueError as e:
            raise DecodeError(f"Invalid artifact listing for namespace {namespace}: {e}") from e
        if not isinstance(data, list):
            raise DecodeError(
                f"Artifact listing for namespace {namespace} must be a JSON array"
            )
        try:
            return [ArtifactSummary.model_validate(item) for item in data]
        except ValidationError as e:
            raise DecodeError(
                f"Unexpected artifact entry in listing for namespace {namespace}",
                detail={"errors": e.errors(include_url=False)},
            ) from e

    def delete_artifact(self, namespace: str, name: str, version: str) -> None:
        self.http.request("DELETE", self.version_path(namespace, name, version))
        logger.info(f"Deleted artifact {namespace}/{name}:{version}")

    def close(self):
        self.http.close()
