"""Pre-built binary download action."""

import logging
import os
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path

import requests

from dotular import __version__
from dotular.actions.base import Action, ActionError
from dotular.core.platform import expand_path

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT = 300.0
CHUNK_SIZE = 64 * 1024


def extract_from_tar(archive: Path, name: str, dest: Path) -> None:
    """Extract the regular file whose basename is ``name`` from a gzipped tar.

    Raises:
        ActionError: If the archive is invalid or has no such member.
    """
    try:
        with tarfile.open(archive, "r:gz") as tar:
            for member in tar.getmembers():
                if member.isfile() and Path(member.name).name == name:
                    source = tar.extractfile(member)
                    if source is None:
                        break
                    with source, open(dest, "wb") as out:
                        shutil.copyfileobj(source, out)
                    return
    except (tarfile.TarError, OSError) as e:
        msg = f"read archive: {e}"
        raise ActionError(msg) from e
    msg = f'binary "{name}" not found in archive'
    raise ActionError(msg)


def extract_from_zip(archive: Path, name: str, dest: Path) -> None:
    """Extract the file whose basename is ``name`` from a zip archive.

    Raises:
        ActionError: If the archive is invalid or has no such member.
    """
    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                if not info.is_dir() and Path(info.filename).name == name:
                    with zf.open(info) as source, open(dest, "wb") as out:
                        shutil.copyfileobj(source, out)
                    return
    except (zipfile.BadZipFile, OSError) as e:
        msg = f"read zip: {e}"
        raise ActionError(msg) from e
    msg = f'binary "{name}" not found in zip'
    raise ActionError(msg)


class BinaryAction(Action):
    """Download a pre-built binary, extract it if archived, and install it.

    Attributes:
        name: Binary name, also used to find it inside archives.
        version: Version string, for display only.
        source_url: Download URL for the current OS.
        install_to: Destination directory (may contain ``~`` and ``$VARS``).
    """

    def __init__(
        self,
        name: str,
        source_url: str,
        install_to: str = "~/.local/bin",
        version: str | None = None,
    ) -> None:
        self.name = name
        self.source_url = source_url
        self.install_to = install_to
        self.version = version

    def resolved_target(self) -> Path:
        """Path the binary is installed to."""
        return Path(expand_path(self.install_to)) / self.name

    def describe(self) -> str:
        version = f"@{self.version}" if self.version else ""
        return f"install binary {self.name}{version} -> {expand_path(self.install_to)}"

    def run(self, dry_run: bool = False) -> None:
        if dry_run:
            self.print_dry_run()
            return

        dest = self.resolved_target()
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"create install dir: {e}"
            raise ActionError(msg) from e

        fd, tmp_name = tempfile.mkstemp(prefix="dotular-bin-")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                self._download(f)
            self._install(tmp_path, dest)
            dest.chmod(0o755)
        except OSError as e:
            msg = f"install binary {self.name}: {e}"
            raise ActionError(msg) from e
        finally:
            tmp_path.unlink(missing_ok=True)

    def _download(self, f) -> None:
        headers = {"User-Agent": f"dotular/{__version__}"}
        try:
            with requests.get(
                self.source_url, headers=headers, stream=True, timeout=DOWNLOAD_TIMEOUT
            ) as response:
                response.raise_for_status()
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
        except requests.RequestException as e:
            msg = f"download {self.source_url}: {e}"
            raise ActionError(msg) from e
        logger.debug("Downloaded %s", self.source_url)

    def _install(self, downloaded: Path, dest: Path) -> None:
        lower = self.source_url.lower()
        if lower.endswith((".tar.gz", ".tgz")):
            extract_from_tar(downloaded, self.name, dest)
        elif lower.endswith(".zip"):
            extract_from_zip(downloaded, self.name, dest)
        else:
            shutil.copyfile(downloaded, dest)
