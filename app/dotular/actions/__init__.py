"""Action implementations.

Each configuration item kind has a matching action that knows how to apply
it on the current machine.
"""

from dotular.actions.base import Action, ActionError, Idempotent
from dotular.actions.binary import BinaryAction
from dotular.actions.directory import DirectoryAction
from dotular.actions.file import FileAction
from dotular.actions.package import PackageAction
from dotular.actions.run import RunAction
from dotular.actions.script import ScriptAction
from dotular.actions.setting import SettingAction

__all__ = [
    "Action",
    "ActionError",
    "BinaryAction",
    "DirectoryAction",
    "FileAction",
    "Idempotent",
    "PackageAction",
    "RunAction",
    "ScriptAction",
    "SettingAction",
]
