import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import httpx
import pytest

from cdap_sdk.client.artifacts import ArtifactClient
from cdap_sdk.resources.local_artifact import LocalArtifactResource


class FakeRegistry:
    """In-memory registry answering the /v3 artifact endpoints"""

    def __init__(self):
        # (namespace, name) -> version -> {"jar", "extends", "properties"}
        self.artifacts: Dict[Tuple[str, str], Dict[str, dict]] = {}
        self.requests: List[httpx.Request] = []
        # method -> (status, body) returned instead of handling
        self.failures: Dict[str, Tuple[int, str]] = {}
        self.listing_override: Optional[bytes] = None

    def calls(self) -> List[Tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method in self.failures:
            status, body = self.failures[request.method]
            return httpx.Response(status, text=body)

        parts = request.url.path.strip("/").split("/")
        # v3 / namespaces / {ns} / artifacts [/ {name} [/ versions / {v} [/ properties]]]
        assert parts[:2] == ["v3", "namespaces"] and parts[3] == "artifacts"
        ns = parts[2]
        rest = parts[4:]

        if request.method == "GET" and not rest:
            if self.listing_override is not None:
                return httpx.Response(200, content=self.listing_override)
            listing = [
                {"name": name, "version": version, "scope": "USER"}
                for (a_ns, name), versions in sorted(self.artifacts.items())
                if a_ns == ns
                for version in versions
            ]
            return httpx.Response(200, json=listing)

        if request.method == "POST" and len(rest) == 1:
            versions = self.artifacts.setdefault((ns, rest[0]), {})
            entry = versions.setdefault(request.headers["Artifact-Version"], {})
            entry["jar"] = request.content
            entry["extends"] = request.headers["Artifact-Extends"]
            return httpx.Response(200, text="Artifact added successfully")

        if len(rest) >= 3 and rest[1] == "versions":
            name, version = rest[0], rest[2]
            versions = self.artifacts.get((ns, name), {})
            if version not in versions:
                return httpx.Response(404, text=f"Artifact '{name}:{version}' not found")
            if request.method == "PUT" and rest[3:] == ["properties"]:
                versions[version]["properties"] = json.loads(request.content)
                return httpx.Response(200)
            if request.method == "DELETE" and len(rest) == 3:
                del versions[version]
                if not versions:
                    del self.artifacts[(ns, name)]
                return httpx.Response(200)

        return httpx.Response(405, text="Method not allowed")


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def client(registry) -> ArtifactClient:
    transport = httpx.MockTransport(registry.handler)
    c = ArtifactClient("http://cdap:11015", client=httpx.Client(transport=transport))
    yield c
    c.close()


@pytest.fixture
def resource(client) -> LocalArtifactResource:
    return LocalArtifactResource(client, default_namespace="default")


def write_artifact(
    directory: Path,
    name: str = "etl",
    jar: bytes = b"\x01\x02",
    config: Optional[dict] = None,
) -> Tuple[Path, Path]:
    jar_path = directory / f"{name}.jar"
    config_path = directory / f"{name}.json"
    jar_path.write_bytes(jar)
    config_path.write_text(json.dumps(config if config is not None else {}))
    return jar_path, config_path


@pytest.fixture
def artifact_attrs(tmp_path) -> dict:
    jar_path, config_path = write_artifact(
        tmp_path,
        config={"properties": {"widgets.etl": "{}"}, "parents": ["core", "utils"]},
    )
    return {
        "name": "etl",
        "version": "1.0",
        "jar_binary_path": str(jar_path),
        "json_config_path": str(config_path),
    }
