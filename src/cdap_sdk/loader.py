"""
Local side of an artifact: reads the jar and its json config from disk and
assembles the payload that gets sent to the registry. No network access here.
"""
import json
import logging
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from .exceptions import ArtifactIOError, DecodeError
from .models.artifacts import ArtifactConfig, ArtifactDescriptor, ArtifactPayload

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_bytes(path: PathLike, what: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise ArtifactIOError(str(path), f"Failed to read {what} {path}: {e}") from e


def read_jar(path: PathLike) -> bytes:
    return _read_bytes(path, "jar binary")


def read_artifact_config(path: PathLike) -> ArtifactConfig:
    """
    Read and decode an artifact json config.

    Args:
        path: json file with optional ``properties`` (object of string to
            string) and optional ``parents`` (array of string)

    Returns:
        ArtifactConfig, with empty properties/parents when absent

    Raises:
        ArtifactIOError: file unreadable
        DecodeError: invalid json or unexpected shape
    """
    raw = _read_bytes(path, "artifact config")
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise DecodeError(f"Invalid JSON in {path}: {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise DecodeError(
            f"Artifact config {path} must be a JSON object, got {type(data).__name__}",
            path=str(path),
        )
    try:
        return ArtifactConfig.model_validate(data)
    except ValidationError as e:
        raise DecodeError(
            f"Artifact config {path} does not match properties/parents shape",
            detail={"errors": e.errors(include_url=False)},
            path=str(path),
        ) from e


def init_artifact_data(descriptor: ArtifactDescriptor) -> ArtifactPayload:
    """Build a fresh payload from the descriptor's jar and config files."""
    jar = read_jar(descriptor.jar_binary_path)
    config = read_artifact_config(descriptor.json_config_path)
    logger.debug(
        f"Loaded artifact {descriptor.name}:{descriptor.version} "
        f"({len(jar)} bytes, {len(config.properties)} properties, parents={config.parents})"
    )
    return ArtifactPayload(
        name=descriptor.name,
        version=descriptor.version,
        config=config,
        jar=jar,
    )
