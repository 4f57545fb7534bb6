"""
Minimal declarative apply loop for local artifacts.

Desired artifacts come from a JSON manifest, what was created before is kept
in a JSON state file. Each pass compares both, asks the registry whether
tracked artifacts still exist, and runs create/delete callbacks of
``LocalArtifactResource`` one at a time.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ArtifactIOError, DecodeError
from .models.artifacts import ArtifactDescriptor
from .models.enums import PlanAction, ResourceState
from .resources.local_artifact import LocalArtifactResource, ResourceData

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

PATH_ATTRIBUTES = ("jar_binary_path", "json_config_path")


class ResourceEntry(BaseModel):
    id: Optional[str] = None
    state: ResourceState = ResourceState.PENDING
    attributes: Dict[str, str]


class PlannedAction(BaseModel):
    action: PlanAction
    key: str
    desired: Optional[ArtifactDescriptor] = None
    changed: List[str] = Field(default_factory=list)


class StateFile:
    """JSON file mapping "{namespace}/{name}" to the tracked resource entry"""

    def __init__(self, path: PathLike):
        self.path = Path(path)

    def load(self) -> Dict[str, ResourceEntry]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ArtifactIOError(str(self.path), f"Failed to read state {self.path}: {e}") from e
        except ValueError as e:
            raise DecodeError(f"Invalid JSON in state {self.path}: {e}", path=str(self.path)) from e
        if not isinstance(raw, dict):
            raise DecodeError(f"State {self.path} must be a JSON object", path=str(self.path))
        try:
            return {key: ResourceEntry.model_validate(v) for key, v in raw.items()}
        except ValidationError as e:
            raise DecodeError(
                f"Unexpected entry in state {self.path}",
                detail={"errors": e.errors(include_url=False)},
                path=str(self.path),
            ) from e

    def save(self, entries: Dict[str, ResourceEntry]) -> None:
        data = {key: entry.model_dump(mode="json") for key, entry in sorted(entries.items())}
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            raise ArtifactIOError(str(self.path), f"Failed to write state {self.path}: {e}") from e


def load_manifest(path: PathLike, default_namespace: str) -> List[ArtifactDescriptor]:
    """
    Read ``{"artifacts": [...]}`` from a JSON manifest.

    Relative jar/config paths are resolved against the manifest's directory.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ArtifactIOError(str(path), f"Failed to read manifest {path}: {e}") from e
    except ValueError as e:
        raise DecodeError(f"Invalid JSON in manifest {path}: {e}", path=str(path)) from e

    items = raw.get("artifacts") if isinstance(raw, dict) else None
    if not isinstance(items, list):
        raise DecodeError(f"Manifest {path} must contain an 'artifacts' array", path=str(path))

    descriptors: List[ArtifactDescriptor] = []
    seen = set()
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise DecodeError(f"Manifest {path}: artifact #{i} is not an object", path=str(path))
        attrs = dict(item)
        for attr in PATH_ATTRIBUTES:
            value = attrs.get(attr)
            if isinstance(value, str) and value and not Path(value).is_absolute():
                attrs[attr] = str(path.parent / value)
        try:
            desc = ArtifactDescriptor.from_attributes(attrs, default_namespace)
        except ValidationError as e:
            raise DecodeError(
                f"Manifest {path}: invalid artifact #{i}",
                detail={"errors": e.errors(include_url=False)},
                path=str(path),
            ) from e
        if desc.key in seen:
            raise DecodeError(f"Manifest {path}: duplicate artifact {desc.key}", path=str(path))
        seen.add(desc.key)
        descriptors.append(desc)
    return descriptors


class Reconciler:
    def __init__(self, resource: LocalArtifactResource, state_file: StateFile):
        self.resource = resource
        self.state_file = state_file

    def plan(self, desired: Iterable[ArtifactDescriptor]) -> List[PlannedAction]:
        entries = self.state_file.load()
        wanted = {d.key: d for d in desired}
        actions: List[PlannedAction] = []

        for key in sorted(set(entries) - set(wanted)):
            actions.append(PlannedAction(action=PlanAction.DELETE, key=key))

        for key, desc in wanted.items():
            entry = entries.get(key)
            new_attrs = desc.model_dump()
            if entry is None:
                actions.append(PlannedAction(action=PlanAction.CREATE, key=key, desired=desc))
                continue
            changed = self.resource.diff(entry.attributes, new_attrs)
            if changed:
                actions.append(
                    PlannedAction(
                        action=PlanAction.REPLACE, key=key, desired=desc, changed=changed
                    )
                )
            elif entry.state == ResourceState.PENDING:
                # jar uploaded but properties never confirmed; create again
                actions.append(PlannedAction(action=PlanAction.CREATE, key=key, desired=desc))
            elif not self.resource.exists(ResourceData(entry.attributes, id=entry.id)):
                logger.warning(f"Artifact {key} is no longer listed remotely, recreating")
                actions.append(PlannedAction(action=PlanAction.CREATE, key=key, desired=desc))
            else:
                self.resource.read(ResourceData(entry.attributes, id=entry.id))
                actions.append(PlannedAction(action=PlanAction.NOOP, key=key, desired=desc))
        return actions

    def apply(self, desired: Iterable[ArtifactDescriptor]) -> List[PlannedAction]:
        """Run the plan in order. The first error aborts the pass."""
        actions = self.plan(desired)
        for action in actions:
            self.execute(action)
        return actions

    def execute(self, action: PlannedAction) -> None:
        entries = self.state_file.load()
        if action.action in (PlanAction.DELETE, PlanAction.REPLACE):
            entry = entries.get(action.key)
            if entry is not None:
                self.resource.delete(ResourceData(entry.attributes, id=entry.id))
                del entries[action.key]
                self.state_file.save(entries)
        if action.action in (PlanAction.CREATE, PlanAction.REPLACE):
            self._create(entries, action.key, action.desired)

    def _create(
        self, entries: Dict[str, ResourceEntry], key: str, desc: ArtifactDescriptor
    ) -> None:
        data = ResourceData(desc.model_dump())

        def mark_pending(name: str) -> None:
            entries[key] = ResourceEntry(
                state=ResourceState.PENDING, attributes=data.attributes
            )
            self.state_file.save(entries)

        try:
            self.resource.create(data, on_uploaded=mark_pending)
        except Exception:
            state = entries[key].state.value if key in entries else "untracked"
            logger.error(f"Create of artifact {key} failed ({state})")
            raise
        entries[key] = ResourceEntry(
            id=data.id, state=ResourceState.PRESENT, attributes=data.attributes
        )
        self.state_file.save(entries)

    def destroy(self) -> List[PlannedAction]:
        entries = self.state_file.load()
        actions = [PlannedAction(action=PlanAction.DELETE, key=key) for key in sorted(entries)]
        for action in actions:
            self.execute(action)
        return actions
