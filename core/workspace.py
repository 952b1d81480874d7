"""Workspace member resolution via `cargo metadata`."""

import os
import subprocess
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from .errors import WorkspaceError
from .models import WorkspaceMember, WorkspaceMetadata


class CargoMetadataResolver:
    """Resolver for the members of a Cargo workspace."""

    def __init__(self, cargo: str | None = None):
        """Initialize the resolver.

        Args:
            cargo: Cargo executable; defaults to $CARGO, then `cargo` on PATH
        """
        self.cargo = cargo or os.environ.get("CARGO") or "cargo"

    def build_command(
        self,
        manifest_path: Path | None = None,
        locked: bool = False,
        no_deps: bool = False,
    ) -> list[str]:
        """Build the `cargo metadata` invocation."""
        cmd = [self.cargo, "metadata", "--format-version", "1", "--all-features"]
        if no_deps:
            cmd.append("--no-deps")
        if manifest_path is not None:
            cmd.extend(["--manifest-path", str(manifest_path)])
        if locked:
            cmd.append("--locked")
        cmd.append("--offline")
        return cmd

    def resolve(
        self, manifest_path: Path | None = None, locked: bool = False
    ) -> WorkspaceMetadata:
        """Resolve workspace metadata.

        A failed query is retried once without dependency resolution, which
        still reports every member's identity and manifest path.

        Args:
            manifest_path: Path to the workspace or package Cargo.toml
            locked: Require Cargo.lock to be up to date

        Returns:
            Parsed workspace metadata
        """
        try:
            return self._exec(self.build_command(manifest_path, locked))
        except WorkspaceError:
            return self._exec(self.build_command(manifest_path, locked, no_deps=True))

    def _exec(self, cmd: list[str]) -> WorkspaceMetadata:
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise WorkspaceError(f"failed to run `{cmd[0]}`: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise WorkspaceError(f"`{' '.join(cmd)}` failed: {stderr}")

        try:
            return WorkspaceMetadata.model_validate_json(result.stdout)
        except ValidationError as e:
            raise WorkspaceError(f"invalid output from `{' '.join(cmd)}`: {e}") from e


def resolve_workspace(
    manifest_path: Path | None = None, locked: bool = False
) -> WorkspaceMetadata:
    """Resolve workspace metadata with the default cargo executable.

    Args:
        manifest_path: Path to the workspace or package Cargo.toml
        locked: Require Cargo.lock to be up to date

    Returns:
        Parsed workspace metadata
    """
    resolver = CargoMetadataResolver()
    return resolver.resolve(manifest_path, locked)


def find_workspace_members(metadata: WorkspaceMetadata) -> list[WorkspaceMember]:
    """Return the workspace's own packages, in metadata order."""
    member_ids = set(metadata.workspace_members)
    return [
        WorkspaceMember(name=package.name, manifest_path=Path(package.manifest_path))
        for package in metadata.packages
        if package.id in member_ids
    ]


def filter_members(
    members: Iterable[WorkspaceMember], excluded: Iterable[str]
) -> list[WorkspaceMember]:
    """Drop members whose package name is excluded, keeping order."""
    excluded = set(excluded)
    return [member for member in members if member.name not in excluded]
