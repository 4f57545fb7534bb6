from .apply import Reconciler, StateFile, load_manifest
from .client import ArtifactClient, HttpClient
from .config import RegistryConfig
from .exceptions import (
    ArtifactIOError,
    DecodeError,
    RemoteError,
    SDKException,
    TimeoutException,
    TransportError,
)
from .loader import init_artifact_data, read_artifact_config
from .models import ArtifactConfig, ArtifactDescriptor, ArtifactPayload, ResourceState
from .resources import LocalArtifactResource, ResourceData
from .version import SDK_VERSION

__all__ = [
    "ArtifactClient",
    "ArtifactConfig",
    "ArtifactDescriptor",
    "ArtifactIOError",
    "ArtifactPayload",
    "DecodeError",
    "HttpClient",
    "LocalArtifactResource",
    "Reconciler",
    "RegistryConfig",
    "RemoteError",
    "ResourceData",
    "ResourceState",
    "SDKException",
    "SDK_VERSION",
    "StateFile",
    "TimeoutException",
    "TransportError",
    "init_artifact_data",
    "load_manifest",
    "read_artifact_config",
]
