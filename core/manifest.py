"""Format-preserving access to Cargo.toml manifests."""

from collections.abc import Iterator
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.toml_document import TOMLDocument

from .errors import ManifestError

DEPENDENCY_TABLES = ("dependencies", "dev-dependencies", "build-dependencies")


def is_table_like(value) -> bool:
    """Check if a TOML value can carry sub-fields.

    Covers `[table]` sections, inline `{ ... }` tables and out-of-order
    table proxies, all of which tomlkit exposes as dict subclasses.
    """
    return isinstance(value, dict)


class LocalManifest:
    """An editable Cargo.toml loaded from disk."""

    def __init__(self, path: Path, document: TOMLDocument):
        self.path = path
        self.document = document

    @classmethod
    def load(cls, path: Path) -> "LocalManifest":
        """Read and parse a manifest.

        Args:
            path: Location of the Cargo.toml

        Returns:
            The loaded manifest

        Raises:
            ManifestError: If the file cannot be read or is not valid TOML
        """
        path = Path(path)
        try:
            with path.open(encoding="utf-8", newline="") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(path, f"failed to read manifest: {e}") from e

        try:
            document = tomlkit.parse(content)
        except TOMLKitError as e:
            raise ManifestError(path, f"failed to parse manifest: {e}") from e

        return cls(path, document)

    def get_dependency_tables(self) -> Iterator[dict]:
        """Yield every dependency table, including target-specific ones."""
        yield from _dependency_tables(self.document)

        target = self.document.get("target")
        if is_table_like(target):
            for platform in target.values():
                if is_table_like(platform):
                    yield from _dependency_tables(platform)

    def write(self) -> None:
        """Serialize the document back to its original path."""
        try:
            with self.path.open("w", encoding="utf-8", newline="") as f:
                f.write(tomlkit.dumps(self.document))
        except OSError as e:
            raise ManifestError(self.path, f"failed to write manifest: {e}") from e


def _dependency_tables(table) -> Iterator[dict]:
    for name in DEPENDENCY_TABLES:
        deps = table.get(name)
        if is_table_like(deps):
            yield deps
