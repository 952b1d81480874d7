"""Core data models for cargo-set-registry."""

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel


@dataclass(frozen=True)
class WorkspaceMember:
    """A package belonging to the workspace."""

    name: str
    manifest_path: Path


@dataclass(frozen=True)
class RegistryChange:
    """A registry field added or changed on one dependency entry."""

    member: str
    dependency: str
    new_registry: str
    old_registry: str | None = None  # None when the field was added

    @property
    def kind(self) -> str:
        return "added" if self.old_registry is None else "changed"


class CargoPackage(BaseModel):
    """A package as reported by `cargo metadata`."""

    name: str
    id: str
    manifest_path: str


class WorkspaceMetadata(BaseModel):
    """The subset of `cargo metadata` output this tool reads."""

    packages: list[CargoPackage]
    workspace_members: list[str]
