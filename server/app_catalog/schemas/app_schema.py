from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional

from app_catalog.indexer.models import AppRecord


class ScanRequest(BaseModel):
    """
    Sources to scan. Leave a list out to use the platform defaults for that
    source; send an empty list to skip it.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    start_menu_paths: Optional[List[str]] = Field(
        default=None,
        description="Start Menu root directories to walk for .lnk files",
        examples=[[r"C:\ProgramData\Microsoft\Windows\Start Menu\Programs"]],
    )
    registry_paths: Optional[List[str]] = Field(
        default=None,
        description="Uninstall keys in HIVE\\subkey form",
        examples=[[r"HKEY_CURRENT_USER\SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall"]],
    )
    persist: bool = Field(
        default=False,
        description="Also upsert the result into the local catalog store",
    )


class SkippedItem(BaseModel):
    source: str
    item: str
    reason: str
    kind: str


class ScanResponse(BaseModel):
    apps: List[AppRecord] = Field(default_factory=list)
    skipped: List[SkippedItem] = Field(default_factory=list)
