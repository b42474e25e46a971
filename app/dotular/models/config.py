"""Configuration models for dotular modules.

This module defines the Pydantic models representing the dotular.toml
structure: modules, their hooks, and the polymorphic items they contain.

Items form a discriminated union. The kind of an item is derived from the
single primary field it declares (``package``, ``file``, ``run``, ...) and
validated when the configuration is loaded, so the rest of the program
never has to guess what an item is.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)


class ItemKind(str, Enum):
    """Kind of a configuration item, named after its primary field."""

    PACKAGE = "package"
    SCRIPT = "script"
    FILE = "file"
    DIRECTORY = "directory"
    BINARY = "binary"
    RUN = "run"
    SETTING = "setting"


class Direction(str, Enum):
    """Transfer direction for file and directory items.

    Attributes:
        PUSH: Copy repo -> system.
        PULL: Copy system -> repo.
        SYNC: Bidirectional, prompting on conflicts.
    """

    PUSH = "push"
    PULL = "pull"
    SYNC = "sync"


class PlatformMap(BaseModel):
    """Per-OS values for a field.

    A plain string in the config file applies to every OS.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    macos: Annotated[str | None, Field(description="Value on macOS")] = None
    windows: Annotated[str | None, Field(description="Value on Windows")] = None
    linux: Annotated[str | None, Field(description="Value on Linux")] = None

    @model_validator(mode="before")
    @classmethod
    def expand_plain_string(cls, data: Any) -> Any:
        """Accept ``destination = "~/"`` as shorthand for every OS."""
        if isinstance(data, str):
            return {"macos": data, "windows": data, "linux": data}
        return data

    def for_os(self, os_name: str) -> str | None:
        """Return the value for an OS name as reported by ``current_os()``."""
        values = {"darwin": self.macos, "windows": self.windows, "linux": self.linux}
        return values.get(os_name) or None


class Hooks(BaseModel):
    """Shell commands run around module or item application."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    before_apply: str | None = None
    after_apply: str | None = None
    before_sync: str | None = None
    after_sync: str | None = None


class BaseItem(BaseModel):
    """Fields shared by every item kind.

    Attributes:
        via: Package manager or script source.
        skip_if: Shell guard; the item is skipped when it exits zero.
        verify: Post-apply check; a non-zero exit fails the item.
        hooks: Item-scoped hooks.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: ClassVar[ItemKind]

    via: Annotated[str | None, Field(description="Package manager or script source")] = None
    skip_if: Annotated[str | None, Field(description="Skip when this command exits 0")] = None
    verify: Annotated[str | None, Field(description="Post-apply verification command")] = None
    hooks: Annotated[Hooks, Field(default_factory=Hooks, description="Item hooks")]

    @property
    def is_file_kind(self) -> bool:
        """Whether this item mutates a destination path on the filesystem."""
        return self.kind in (ItemKind.FILE, ItemKind.DIRECTORY)

    @property
    def label(self) -> str:
        """Short ``kind:value`` label used in messages before an action exists."""
        return f"{self.kind.value}:{getattr(self, self.kind.value)}"


class PackageItem(BaseItem):
    """Install a package through a package manager."""

    kind: ClassVar[ItemKind] = ItemKind.PACKAGE

    package: Annotated[str, Field(min_length=1)]


class ScriptItem(BaseItem):
    """Run a local or remote script."""

    kind: ClassVar[ItemKind] = ItemKind.SCRIPT

    script: Annotated[str, Field(min_length=1)]


class _PathItem(BaseItem):
    destination: Annotated[PlatformMap, Field(default_factory=PlatformMap)]
    direction: Direction = Direction.PUSH
    link: bool = False
    permissions: Annotated[str | None, Field(description="Unix octal mode, e.g. 0600")] = None

    @field_validator("permissions")
    @classmethod
    def validate_octal(cls, v: str | None) -> str | None:
        """Permissions must be an octal mode string."""
        if v is None:
            return v
        try:
            mode = int(v, 8)
        except ValueError:
            msg = f"permissions must be an octal string, got {v!r}"
            raise ValueError(msg) from None
        if mode > 0o7777:
            msg = f"permissions out of range: {v!r}"
            raise ValueError(msg)
        return v


class FileItem(_PathItem):
    """Copy, link, or sync a single file between the repo and the system."""

    kind: ClassVar[ItemKind] = ItemKind.FILE

    file: Annotated[str, Field(min_length=1)]


class DirectoryItem(_PathItem):
    """Copy, link, or sync a directory tree between the repo and the system."""

    kind: ClassVar[ItemKind] = ItemKind.DIRECTORY

    directory: Annotated[str, Field(min_length=1)]


class BinaryItem(BaseItem):
    """Download a pre-built binary and install it."""

    kind: ClassVar[ItemKind] = ItemKind.BINARY

    binary: Annotated[str, Field(min_length=1)]
    version: str | None = None
    source: Annotated[PlatformMap, Field(default_factory=PlatformMap)]
    install_to: str = "~/.local/bin"


class RunItem(BaseItem):
    """Run an inline shell command."""

    kind: ClassVar[ItemKind] = ItemKind.RUN

    run: Annotated[str, Field(min_length=1)]
    after: Annotated[str | None, Field(description="Informational ordering hint")] = None


class SettingItem(BaseItem):
    """Write a system preference (macOS ``defaults``)."""

    kind: ClassVar[ItemKind] = ItemKind.SETTING

    setting: Annotated[str, Field(min_length=1)]
    key: Annotated[str, Field(min_length=1)]
    value: bool | int | float | str


_PRIMARY_FIELDS = tuple(kind.value for kind in ItemKind)


def _item_kind(value: Any) -> str | None:
    """Derive the union tag from the single primary field of an item."""
    if isinstance(value, BaseItem):
        return value.kind.value
    if isinstance(value, dict):
        present = [name for name in _PRIMARY_FIELDS if value.get(name) not in (None, "")]
        if len(present) == 1:
            return present[0]
    return None


Item = Annotated[
    Union[
        Annotated[PackageItem, Tag("package")],
        Annotated[ScriptItem, Tag("script")],
        Annotated[FileItem, Tag("file")],
        Annotated[DirectoryItem, Tag("directory")],
        Annotated[BinaryItem, Tag("binary")],
        Annotated[RunItem, Tag("run")],
        Annotated[SettingItem, Tag("setting")],
    ],
    Discriminator(
        _item_kind,
        custom_error_type="invalid_item",
        custom_error_message=(f"item must declare exactly one of: {', '.join(_PRIMARY_FIELDS)}"),
    ),
]


class Module(BaseModel):
    """A named, ordered group of items applied together.

    Attributes:
        name: Module name, unique within a config.
        items: Items in application order.
        only_tags: Apply only on machines carrying one of these tags.
        exclude_tags: Never apply on machines carrying one of these tags.
        hooks: Module-scoped hooks.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    name: Annotated[str, Field(min_length=1)]
    items: Annotated[list[Item], Field(default_factory=list)]
    only_tags: Annotated[
        list[str],
        Field(default_factory=list, validation_alias=AliasChoices("only_tags", "only")),
    ]
    exclude_tags: Annotated[
        list[str],
        Field(default_factory=list, validation_alias=AliasChoices("exclude_tags", "exclude")),
    ]
    hooks: Annotated[Hooks, Field(default_factory=Hooks)]


class Config(BaseModel):
    """Top-level dotular.toml document."""

    model_config = ConfigDict(extra="forbid")

    modules: Annotated[list[Module], Field(default_factory=list)]

    @model_validator(mode="after")
    def validate_unique_names(self) -> "Config":
        """Module names must be unique."""
        seen: set[str] = set()
        duplicates: set[str] = set()
        for module in self.modules:
            if module.name in seen:
                duplicates.add(module.name)
            seen.add(module.name)
        if duplicates:
            msg = f"Duplicate module names: {sorted(duplicates)}"
            raise ValueError(msg)
        return self

    def module(self, name: str) -> Module | None:
        """Return the named module, or None if it is not defined."""
        for module in self.modules:
            if module.name == name:
                return module
        return None
