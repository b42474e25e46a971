"""Conversion of configuration items into runnable actions.

The builder resolves OS-specific values (destinations, download URLs,
package managers) for the current machine. An item that does not apply to
this OS yields a *skip* result, which is not an error.
"""

from dataclasses import dataclass
from pathlib import Path

from dotular.actions.base import Action, Idempotent
from dotular.actions.binary import BinaryAction
from dotular.actions.directory import DirectoryAction
from dotular.actions.file import FileAction
from dotular.actions.package import PackageAction
from dotular.actions.run import RunAction
from dotular.actions.script import ScriptAction
from dotular.actions.setting import SettingAction
from dotular.core.platform import expand_path, package_manager_os
from dotular.models.config import (
    BaseItem,
    BinaryItem,
    Direction,
    DirectoryItem,
    FileItem,
    PackageItem,
    RunItem,
    ScriptItem,
    SettingItem,
)


class ActionBuildError(Exception):
    """Raised when an item cannot be turned into an action."""


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of building one item.

    Attributes:
        action: The action, or None when skipped.
        idempotent: The action's idempotency check, when it has one.
        target: Filesystem path the action mutates, for file and directory
            items. Snapshots record it before the action runs.
        skip: True when the item does not apply to this OS.
    """

    action: Action | None
    idempotent: Idempotent | None = None
    target: Path | None = None
    skip: bool = False

    @classmethod
    def skipped(cls) -> "BuildResult":
        """Result for an item that does not apply to this OS."""
        return cls(action=None, skip=True)


def effective_direction(item: BaseItem, override: Direction | None = None) -> Direction | None:
    """Transfer direction of a file or directory item.

    A direction override (``dotular push|pull|sync``) wins over the item's
    own direction, except for link items, which are always push.

    Returns:
        The direction, or None for items that have no direction.
    """
    if not isinstance(item, (FileItem, DirectoryItem)):
        return None
    if override is not None and not item.link:
        return override
    return item.direction


def is_sync_item(item: BaseItem, override: Direction | None = None) -> bool:
    """Whether the item runs in sync direction."""
    return effective_direction(item, override) == Direction.SYNC


class ActionBuilder:
    """Builds actions for the current OS.

    Attributes:
        source_root: Directory that relative repo paths resolve against.
            Defaults to the current working directory.
    """

    def __init__(self, source_root: Path | None = None) -> None:
        self.source_root = source_root

    def resolve_source(self, path: str) -> Path:
        """Resolve a repo-side path from the config."""
        resolved = Path(expand_path(path))
        if resolved.is_absolute() or self.source_root is None:
            return resolved
        return self.source_root / resolved

    def build(
        self,
        item: BaseItem,
        os_name: str,
        direction_override: Direction | None = None,
    ) -> BuildResult:
        """Build the action for ``item`` on ``os_name``.

        Raises:
            ActionBuildError: If the item kind is not recognised.
        """
        if isinstance(item, PackageItem):
            target_os = package_manager_os(item.via)
            if target_os is not None and target_os != os_name:
                return BuildResult.skipped()
            if not item.via:
                msg = f'package "{item.package}" has no "via" package manager'
                raise ActionBuildError(msg)
            package = PackageAction(package=item.package, manager=item.via)
            return BuildResult(action=package, idempotent=package)

        if isinstance(item, ScriptItem):
            via = item.via or "local"
            script = item.script if via == "remote" else str(self.resolve_source(item.script))
            return BuildResult(action=ScriptAction(script=script, via=via))

        if isinstance(item, FileItem):
            destination = item.destination.for_os(os_name)
            if destination is None:
                return BuildResult.skipped()
            file_action = FileAction(
                source=self.resolve_source(item.file),
                destination=destination,
                direction=effective_direction(item, direction_override) or Direction.PUSH,
                link=item.link,
                permissions=item.permissions,
            )
            return BuildResult(
                action=file_action,
                idempotent=file_action if item.link else None,
                target=file_action.resolved_target(),
            )

        if isinstance(item, DirectoryItem):
            destination = item.destination.for_os(os_name)
            if destination is None:
                return BuildResult.skipped()
            dir_action = DirectoryAction(
                source=self.resolve_source(item.directory),
                destination=destination,
                direction=effective_direction(item, direction_override) or Direction.PUSH,
                link=item.link,
                permissions=item.permissions,
            )
            return BuildResult(
                action=dir_action,
                idempotent=dir_action if item.link else None,
                target=dir_action.resolved_target(),
            )

        if isinstance(item, BinaryItem):
            source_url = item.source.for_os(os_name)
            if source_url is None:
                return BuildResult.skipped()
            return BuildResult(
                action=BinaryAction(
                    name=item.binary,
                    source_url=source_url,
                    install_to=item.install_to,
                    version=item.version,
                )
            )

        if isinstance(item, RunItem):
            return BuildResult(action=RunAction(command=item.run, after=item.after))

        if isinstance(item, SettingItem):
            return BuildResult(
                action=SettingAction(
                    domain=item.setting, key=item.key, value=item.value, os_name=os_name
                )
            )

        msg = f"item has no recognised type: {item!r}"
        raise ActionBuildError(msg)
