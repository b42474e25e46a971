"""Data models for dotular.

This module exports the core data structures used throughout the application.
"""

from dotular.models.audit import AuditEntry, AuditOutcome
from dotular.models.config import (
    BaseItem,
    BinaryItem,
    Config,
    Direction,
    DirectoryItem,
    FileItem,
    Hooks,
    Item,
    ItemKind,
    Module,
    PackageItem,
    PlatformMap,
    RunItem,
    ScriptItem,
    SettingItem,
)

__all__ = [
    "AuditEntry",
    "AuditOutcome",
    "BaseItem",
    "BinaryItem",
    "Config",
    "Direction",
    "DirectoryItem",
    "FileItem",
    "Hooks",
    "Item",
    "ItemKind",
    "Module",
    "PackageItem",
    "PlatformMap",
    "RunItem",
    "ScriptItem",
    "SettingItem",
]
