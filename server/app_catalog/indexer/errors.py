"""
Error taxonomy for the app index.

Only PlatformInitError is fatal for a scan. Everything else is raised by a
collaborator or a parser and turned into a Skip by the ingester that caught it.
"""


class CatalogError(Exception):
    """Base exception."""


class ConfigurationError(CatalogError):
    """A configured source path is malformed (bad hive, missing subkey)."""


class CollaboratorError(CatalogError):
    """An external capability failed for a single item."""


class ShortcutDecodeError(CollaboratorError):
    """A shortcut file could not be decoded."""


class RegistryReadError(CollaboratorError):
    """A registry key could not be opened, enumerated or read."""


class PlatformInitError(CatalogError):
    """The per-call platform context (COM apartment) could not be acquired."""
