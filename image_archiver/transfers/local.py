"""
Local transfer. The 'remote' side is a directory on this machine, e.g.
archive storage mounted over NFS. Basically just a wrapper around `cp`.
"""

import os
import shutil
from pathlib import Path
from socket import gethostname
from typing import TYPE_CHECKING

from ..exceptions import (
    ProvisionError,
    RemoteConnectionError,
    RemoteDirectoryExistsError,
    TransferError,
)
from .core import CoreConnection, CoreTransferManager

if TYPE_CHECKING:
    from ..settings import ArchiverSettings


class LocalConnection(CoreConnection):
    """
    A 'connection' to a local directory tree rooted at root.
    """

    def __init__(self, root: Path):
        self.root = root
        self.cwd = root
        self.closed = False

    def _check_open(self):
        if self.closed:
            raise TransferError(f"Connection to {self.root} is closed")

    def reset_directory(self):
        self._check_open()
        self.cwd = self.root

    def make_directory(self, name: str):
        self._check_open()

        path = self.cwd / name

        try:
            path.mkdir(mode=0o775)
        except FileExistsError as e:
            if path.is_dir():
                raise RemoteDirectoryExistsError(name) from e

            raise ProvisionError(name, "exists and is not a directory") from e
        except OSError as e:
            raise ProvisionError(name, e) from e

    def change_directory(self, name: str):
        self._check_open()

        path = self.cwd / name

        if not path.is_dir():
            raise ProvisionError(name, f"{path} is not a directory")

        self.cwd = path

    def upload(self, local_path: Path):
        self._check_open()

        remote_path = self.cwd / local_path.name

        # Archived files should end up rw-rw-r--, whatever the source had.
        try:
            # Copy2 copies more metadata.
            shutil.copy2(local_path, remote_path)
            os.chmod(remote_path, 0o664)
        except OSError as e:
            raise TransferError(
                f"Could not copy {local_path} to {remote_path}: {e}"
            ) from e

    @property
    def current_directory(self) -> str:
        return self.cwd.relative_to(self.root).as_posix()

    def close(self):
        self.closed = True


class LocalTransferManager(CoreTransferManager):
    root: Path
    "The directory that plays the role of the remote login directory."

    @classmethod
    def from_settings(cls, settings: "ArchiverSettings") -> "LocalTransferManager":
        if settings.local_root is None:
            raise ValueError("The local transfer method requires local_root to be set.")

        return cls(root=settings.local_root)

    def connect(self) -> LocalConnection:
        if not self.root.is_dir():
            raise RemoteConnectionError(
                f"{gethostname()}:{self.root}", "root is not a directory"
            )

        return LocalConnection(root=self.root)
