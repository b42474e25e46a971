"""Local and remote script action."""

import os
import sys
import tempfile
from pathlib import Path

import requests

from dotular.actions.base import Action, ActionError
from dotular.core.platform import expand_path
from dotular.utils.shell import check_call

DOWNLOAD_TIMEOUT = 60.0


def _interpreter() -> str:
    return "powershell" if sys.platform == "win32" else "bash"


class ScriptAction(Action):
    """Run a shell script from a local path or a remote URL.

    Attributes:
        script: Local path or URL.
        via: "local" (default) or "remote".
    """

    def __init__(self, script: str, via: str | None = None) -> None:
        self.script = script
        self.via = via or "local"

    def describe(self) -> str:
        return f'run script "{self.script}" (via {self.via})'

    def run(self, dry_run: bool = False) -> None:
        if dry_run:
            self.print_dry_run()
            return
        if self.via == "remote":
            self._run_remote()
        elif self.via == "local":
            check_call([_interpreter(), expand_path(self.script)])
        else:
            msg = f'unknown script source "{self.via}"; expected "remote" or "local"'
            raise ActionError(msg)

    def _run_remote(self) -> None:
        try:
            response = requests.get(self.script, timeout=DOWNLOAD_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            msg = f"download script {self.script}: {e}"
            raise ActionError(msg) from e

        fd, tmp_name = tempfile.mkstemp(prefix="dotular-", suffix=".sh")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(response.content)
            tmp_path.chmod(0o755)
            check_call([_interpreter(), str(tmp_path)])
        finally:
            tmp_path.unlink(missing_ok=True)
