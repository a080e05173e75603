"""App catalog service: launcher app index over Start Menu shortcuts and the Uninstall registry."""

__version__ = "1.0.0"
