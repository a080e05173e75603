"""
Uninstall-key reader — enumerates child keys and reads value maps.

Hives are passed by their canonical long name ("HKEY_LOCAL_MACHINE",
"HKEY_CURRENT_USER"). WinregUninstallReader is the Windows implementation;
tests supply an in-memory reader with the same two methods.
"""

from __future__ import annotations

from typing import Dict, List, Protocol

from .errors import RegistryReadError
from .models import RegistryValue


class UninstallKeyReader(Protocol):
    def list_child_keys(self, hive: str, subkey: str) -> List[str]:
        """Names of the immediate child keys. Raises RegistryReadError."""
        ...

    def read_values(self, hive: str, subkey: str) -> Dict[str, RegistryValue]:
        """String and 32-bit integer values of a key. Raises RegistryReadError."""
        ...


class WinregUninstallReader:
    """UninstallKeyReader over the standard-library ``winreg`` module."""

    def __init__(self):
        import winreg
        self._winreg = winreg
        self._hives = {
            "HKEY_LOCAL_MACHINE": winreg.HKEY_LOCAL_MACHINE,
            "HKEY_CURRENT_USER": winreg.HKEY_CURRENT_USER,
        }
        self._string_types = {winreg.REG_SZ, winreg.REG_EXPAND_SZ}

    def _open(self, hive: str, subkey: str):
        try:
            root = self._hives[hive]
        except KeyError:
            raise RegistryReadError(f"unsupported registry hive: {hive}") from None
        try:
            return self._winreg.OpenKey(root, subkey, 0, self._winreg.KEY_READ)
        except OSError as e:
            raise RegistryReadError(f"failed to open registry key {hive}\\{subkey}: {e}") from e

    def list_child_keys(self, hive: str, subkey: str) -> List[str]:
        names: List[str] = []
        with self._open(hive, subkey) as key:
            i = 0
            while True:
                try:
                    names.append(self._winreg.EnumKey(key, i))
                except OSError:
                    break
                i += 1
        return names

    def read_values(self, hive: str, subkey: str) -> Dict[str, RegistryValue]:
        values: Dict[str, RegistryValue] = {}
        with self._open(hive, subkey) as key:
            i = 0
            while True:
                try:
                    name, data, value_type = self._winreg.EnumValue(key, i)
                except OSError:
                    break
                i += 1
                if value_type in self._string_types and isinstance(data, str):
                    values[name] = data
                elif value_type == self._winreg.REG_DWORD and isinstance(data, int):
                    values[name] = data
        return values
