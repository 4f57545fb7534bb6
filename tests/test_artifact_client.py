import json

import httpx
import pytest

from cdap_sdk.client.artifacts import ArtifactClient
from cdap_sdk.client.http_client import url_join
from cdap_sdk.exceptions import DecodeError, RemoteError, TimeoutException, TransportError
from cdap_sdk.models.artifacts import ArtifactConfig, ArtifactPayload


def build_payload(parents=None, properties=None) -> ArtifactPayload:
    return ArtifactPayload(
        name="etl",
        version="1.0",
        config=ArtifactConfig(parents=parents or [], properties=properties or {}),
        jar=b"\x01\x02",
    )


def test_url_join_quotes_values():
    assert url_join("/v3/namespaces", "default") == "/v3/namespaces/default"
    assert url_join("/v3/namespaces/", "a b", "x/y") == "/v3/namespaces/a%20b/x%2Fy"


def test_url_join_quotes_leading_slash_values():
    assert url_join("/v3/namespaces", "/x") == "/v3/namespaces/%2Fx"
    assert url_join("/v3/namespaces", "/") == "/v3/namespaces/%2F"


def test_leading_slash_name_stays_one_segment():
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append((request.method, request.url.raw_path.decode()))
        return httpx.Response(200)

    client = ArtifactClient("http://cdap:11015", client=httpx.Client(transport=httpx.MockTransport(handler)))
    payload = build_payload().model_copy(update={"name": "/etl"})
    client.upload_jar("default", payload)
    client.upload_properties("default", payload)
    client.delete_artifact("/", "/etl", "1.0")

    assert paths == [
        ("POST", "/v3/namespaces/default/artifacts/%2Fetl"),
        ("PUT", "/v3/namespaces/default/artifacts/%2Fetl/versions/1.0/properties"),
        ("DELETE", "/v3/namespaces/%2F/artifacts/%2Fetl/versions/1.0"),
    ]


def test_upload_jar_request(client, registry):
    client.upload_jar("default", build_payload(parents=["core", "utils"]))

    req = registry.requests[-1]
    assert req.method == "POST"
    assert req.url.path == "/v3/namespaces/default/artifacts/etl"
    assert req.content == b"\x01\x02"
    assert req.headers["Artifact-Version"] == "1.0"
    assert req.headers["Artifact-Extends"] == "core/utils"


def test_upload_jar_without_parents_sends_empty_extends(client, registry):
    client.upload_jar("default", build_payload())
    assert registry.requests[-1].headers["Artifact-Extends"] == ""


def test_upload_properties_request(client, registry):
    payload = build_payload(properties={"k": "v"})
    client.upload_jar("ns1", payload)
    client.upload_properties("ns1", payload)

    req = registry.requests[-1]
    assert req.method == "PUT"
    assert req.url.path == "/v3/namespaces/ns1/artifacts/etl/versions/1.0/properties"
    assert json.loads(req.content) == {"k": "v"}


def test_upload_properties_empty_body_is_object(client, registry):
    payload = build_payload()
    client.upload_jar("default", payload)
    client.upload_properties("default", payload)
    assert json.loads(registry.requests[-1].content) == {}


def test_list_artifacts(client, registry):
    registry.listing_override = json.dumps(
        [{"name": "etl", "version": "1.0", "scope": "USER", "extra": 1}, {"name": "other"}]
    ).encode()
    artifacts = client.list_artifacts("default")
    assert [a.name for a in artifacts] == ["etl", "other"]
    assert artifacts[0].version == "1.0"
    assert artifacts[1].version is None
    assert registry.requests[-1].url.path == "/v3/namespaces/default/artifacts"


@pytest.mark.parametrize("body", [b"not json", b'{"name": "etl"}', b'[{"version": "1"}]', b'["etl"]'])
def test_list_artifacts_malformed(client, registry, body):
    registry.listing_override = body
    with pytest.raises(DecodeError):
        client.list_artifacts("default")


def test_delete_artifact(client, registry):
    client.upload_jar("default", build_payload())
    client.delete_artifact("default", "etl", "1.0")
    req = registry.requests[-1]
    assert req.method == "DELETE"
    assert req.url.path == "/v3/namespaces/default/artifacts/etl/versions/1.0"
    assert registry.artifacts == {}


def test_delete_missing_version_surfaces_registry_error(client):
    with pytest.raises(RemoteError) as exc:
        client.delete_artifact("default", "etl", "9.9")
    assert exc.value.status_code == 404
    assert "not found" in exc.value.body


def test_non_success_status_raises_remote_error(client, registry):
    registry.failures["POST"] = (500, "bad jar")
    with pytest.raises(RemoteError) as exc:
        client.upload_jar("default", build_payload())
    assert exc.value.status_code == 500
    assert exc.value.body == "bad jar"
    assert "500" in str(exc.value)


def test_connection_failure_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ArtifactClient("http://cdap:11015", client=httpx.Client(transport=httpx.MockTransport(handler)))
    with pytest.raises(TransportError) as exc:
        client.list_artifacts("default")
    assert not isinstance(exc.value, TimeoutException)


def test_timeout_raises_timeout_exception():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    client = ArtifactClient("http://cdap:11015", client=httpx.Client(transport=httpx.MockTransport(handler)))
    with pytest.raises(TimeoutException):
        client.delete_artifact("default", "etl", "1.0")


def test_extra_headers_are_sent(registry):
    client = ArtifactClient(
        "http://cdap:11015/",
        extra_headers={"X-Tenant": "t1"},
        client=httpx.Client(transport=httpx.MockTransport(registry.handler)),
    )
    client.list_artifacts("default")
    req = registry.requests[-1]
    assert req.headers["X-Tenant"] == "t1"
    assert req.headers["User-Agent"].startswith("cdap-sdk/")
    assert str(req.url) == "http://cdap:11015/v3/namespaces/default/artifacts"
