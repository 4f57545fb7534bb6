from .local_artifact import SCHEMA, AttributeSchema, LocalArtifactResource, ResourceData

__all__ = ["SCHEMA", "AttributeSchema", "LocalArtifactResource", "ResourceData"]
