"""Pytest configuration and fixtures."""

import json
import subprocess
from unittest.mock import patch

import pytest

from core.models import WorkspaceMember


def metadata_json(members: list[WorkspaceMember], extra_packages=()) -> str:
    """Build `cargo metadata` output listing the given members."""
    packages = [
        {
            "name": member.name,
            "version": "0.1.0",
            "id": f"path+file://{member.manifest_path.parent}#{member.name}@0.1.0",
            "manifest_path": str(member.manifest_path),
            "dependencies": [],
        }
        for member in members
    ]
    packages.extend(extra_packages)
    return json.dumps({
        "packages": packages,
        "workspace_members": [p["id"] for p in packages[: len(members)]],
        "workspace_root": "/ws",
        "version": 1,
    })


def completed(stdout: str = "", returncode: int = 0, stderr: str = ""):
    """A finished `cargo` process."""
    return subprocess.CompletedProcess(
        args=["cargo", "metadata"], returncode=returncode, stdout=stdout, stderr=stderr
    )


@pytest.fixture
def sample_manifest():
    """Sample member manifest with a mix of dependency forms."""
    return """[package]
name = "app"
version = "0.1.0"

# Runtime deps
[dependencies]
dep-a = "1.0"
dep-b = { version = "2.0", registry = "old" }  # keep me
dep-c = { version = "3.0" }

[dev-dependencies]
dep-b = { version = "2.0" }

[target.'cfg(unix)'.build-dependencies]
dep-c = { version = "3.0", registry = "old" }
"""


@pytest.fixture
def workspace(tmp_path, sample_manifest):
    """Two-member workspace on disk."""
    app_dir = tmp_path / "app"
    lib_dir = tmp_path / "lib"
    app_dir.mkdir()
    lib_dir.mkdir()

    app_manifest = app_dir / "Cargo.toml"
    app_manifest.write_text(sample_manifest)

    lib_manifest = lib_dir / "Cargo.toml"
    lib_manifest.write_text(
        '[package]\nname = "lib"\nversion = "0.1.0"\n\n'
        '[dependencies]\ndep-b = { version = "2.0", registry = "old" }\n'
    )

    (tmp_path / "Cargo.toml").write_text('[workspace]\nmembers = ["app", "lib"]\n')

    return [
        WorkspaceMember(name="app", manifest_path=app_manifest),
        WorkspaceMember(name="lib", manifest_path=lib_manifest),
    ]


@pytest.fixture
def cargo_metadata(workspace):
    """Patch `cargo metadata` to report the sample workspace."""
    with patch("core.workspace.subprocess.run") as mock_run:
        mock_run.return_value = completed(metadata_json(workspace))
        yield mock_run
