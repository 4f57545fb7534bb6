from .artifacts import ArtifactConfig, ArtifactDescriptor, ArtifactPayload, ArtifactSummary
from .enums import ErrorCode, PlanAction, ResourceState

__all__ = [
    "ArtifactConfig",
    "ArtifactDescriptor",
    "ArtifactPayload",
    "ArtifactSummary",
    "ErrorCode",
    "PlanAction",
    "ResourceState",
]
