"""Errors raised by cargo-set-registry."""


class SetRegistryError(Exception):
    """Base class for all fatal errors of a set-registry run."""


class WorkspaceError(SetRegistryError):
    """Workspace metadata could not be resolved."""


class ManifestError(SetRegistryError):
    """A manifest could not be read, parsed or written."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")
