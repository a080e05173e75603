"""
Data model for the app index.

AppRecord is the only type that leaves a scan. ShortcutMetadata and
RawUninstallEntry live for the duration of one item; Skip records why an
item never became an AppRecord.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AppRecord(BaseModel):
    """One launchable application in the catalog."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    name: str = Field(..., min_length=1)
    launch_path: str = Field(..., min_length=1)
    working_directory: Optional[str] = None
    icon_path: Optional[str] = None
    source: str
    last_modified: int = 0


class ScanPaths(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    start_menu_paths: List[str] = Field(default_factory=list)
    registry_paths: List[str] = Field(default_factory=list)


@dataclass
class ShortcutMetadata:
    target: Optional[str] = None
    arguments: Optional[str] = None
    working_directory: Optional[str] = None
    icon_path: Optional[str] = None


RegistryValue = Union[str, int]


def _as_str(values: Dict[str, RegistryValue], name: str) -> Optional[str]:
    value = values.get(name)
    return value if isinstance(value, str) else None


def _as_flag(values: Dict[str, RegistryValue], name: str) -> Optional[int]:
    # bool is an int subclass, REG_DWORD never is
    value = values.get(name)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


@dataclass
class RawUninstallEntry:
    """The values of one uninstall key that classification looks at."""

    display_name: Optional[str] = None
    uninstall_string: Optional[str] = None
    system_component: Optional[int] = None
    no_display: Optional[int] = None
    no_display_icon: Optional[int] = None
    display_icon: Optional[str] = None
    install_location: Optional[str] = None

    @classmethod
    def from_values(cls, values: Dict[str, RegistryValue]) -> "RawUninstallEntry":
        """
        Build an entry from a registry value map.

        A value stored with an unexpected type reads as absent, the same as a
        value that does not exist.
        """
        return cls(
            display_name=_as_str(values, "DisplayName"),
            uninstall_string=_as_str(values, "UninstallString"),
            system_component=_as_flag(values, "SystemComponent"),
            no_display=_as_flag(values, "NoDisplay"),
            no_display_icon=_as_flag(values, "NoDisplayIcon"),
            display_icon=_as_str(values, "DisplayIcon"),
            install_location=_as_str(values, "InstallLocation"),
        )


SkipKind = Literal["configuration", "collaborator", "filtered"]


@dataclass(frozen=True)
class Skip:
    """An item an ingester looked at and left out of the catalog."""

    source: str
    item: str
    reason: str
    kind: SkipKind = "filtered"


ScanItem = Union[AppRecord, Skip]
