import os
import platform
from pathlib import Path
from typing import Optional


class PathManager:
    """
    Resolves the writable user data directory for the catalog service.
    Always uses Local paths (not Roaming).
    """

    def __init__(self, env: Optional[dict] = None):
        """
        env: dictionary of environment variables (defaults to os.environ)
        """
        self.env = env or os.environ
        self.system = platform.system()
        self._setup_paths()

    def _default_user_data_dir(self) -> Path:
        """Determine OS-specific writable user data directory (Local)."""
        if self.system == "Windows":
            return Path.home() / "AppData" / "Local" / "AppCatalog"
        elif self.system == "Darwin":
            return Path.home() / "Library" / "Application Support" / "AppCatalog"
        else:
            # Linux / Unix
            return Path.home() / ".local" / "share" / "AppCatalog"

    def _setup_paths(self):
        self.USER_DATA_DIR = Path(self.env.get("APP_CATALOG_DATA_DIR", self._default_user_data_dir()))

    # Accessors
    def get_user_data_dir(self) -> Path:
        return self.USER_DATA_DIR
