"""Rewrite the registry of selected dependencies across a workspace."""

from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from .manifest import LocalManifest, is_table_like
from .models import RegistryChange, WorkspaceMember
from .workspace import CargoMetadataResolver, filter_members, find_workspace_members

Reporter = Callable[[RegistryChange], None]


def is_selected(key: str, allowed_keys: Sequence[str]) -> bool:
    """Check if a declared dependency key is in the allow-list.

    Keys are compared as trimmed strings, exactly; no alias resolution.
    """
    key = key.strip()
    return any(allowed.strip() == key for allowed in allowed_keys)


def update_member(
    allowed_keys: Sequence[str],
    new_registry: str,
    member: WorkspaceMember,
    dry_run: bool,
    report: Reporter | None = None,
) -> list[RegistryChange]:
    """Point the selected dependencies of one member at a new registry.

    Args:
        allowed_keys: Declared dependency keys to update
        new_registry: Registry name to set
        member: Workspace member whose manifest is edited
        dry_run: Compute changes without writing the manifest
        report: Called with each change as it is recorded

    Returns:
        Changes recorded for this member, applied unless dry_run is set
    """
    manifest = LocalManifest.load(member.manifest_path)
    changes: list[RegistryChange] = []
    changed = False

    for table in manifest.get_dependency_tables():
        for key, dep in table.items():
            if not is_selected(key, allowed_keys):
                continue
            # A bare version string is never promoted to table form
            if not is_table_like(dep):
                continue

            old_registry = dep.get("registry")
            if isinstance(old_registry, str):
                if old_registry == new_registry:
                    continue
                old_registry = str(old_registry)
            else:
                old_registry = None

            dep["registry"] = new_registry
            change = RegistryChange(
                member=member.name,
                dependency=key,
                new_registry=new_registry,
                old_registry=old_registry,
            )
            changes.append(change)
            if report is not None:
                report(change)
            changed = True

    if changed and not dry_run:
        manifest.write()

    return changes


def set_registry(
    registry: str,
    allowed_keys: Sequence[str],
    manifest_path: Path | None = None,
    excluded: Iterable[str] = (),
    dry_run: bool = False,
    locked: bool = False,
    report: Reporter | None = None,
    resolver: CargoMetadataResolver | None = None,
) -> list[RegistryChange]:
    """Run a set-registry pass over a workspace.

    The workspace is resolved again after editing so that a manifest or
    lockfile left inconsistent by the edits is reported as an error.

    Args:
        registry: Registry name to set
        allowed_keys: Declared dependency keys to update
        manifest_path: Path to the workspace Cargo.toml
        excluded: Package names to leave untouched
        dry_run: Compute changes without writing any manifest
        locked: Require Cargo.lock to be up to date
        report: Called with each change as it is recorded
        resolver: Workspace resolver; a default one is created if omitted

    Returns:
        Every change recorded, in member order
    """
    if resolver is None:
        resolver = CargoMetadataResolver()

    metadata = resolver.resolve(manifest_path, locked)
    members = filter_members(find_workspace_members(metadata), excluded)

    changes: list[RegistryChange] = []
    for member in members:
        changes.extend(update_member(allowed_keys, registry, member, dry_run, report))

    resolver.resolve(manifest_path, locked)
    return changes
