"""
SFTP transfer manager, using paramiko. Authentication is by private key
only, and the server must be present in the known hosts file.
"""

import stat
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import paramiko
from loguru import logger

from ..exceptions import (
    ProvisionError,
    RemoteConnectionError,
    RemoteDirectoryExistsError,
    TransferError,
)
from .core import CoreConnection, CoreTransferManager

if TYPE_CHECKING:
    from ..settings import ArchiverSettings


class SFTPConnection(CoreConnection):
    """
    An open SFTP session. The working directory starts at the login
    directory of the user.
    """

    def __init__(self, client: paramiko.SSHClient, sftp: paramiko.SFTPClient, endpoint: str):
        self.client = client
        self.sftp = sftp
        self.endpoint = endpoint
        self.closed = False

    def _is_directory(self, name: str) -> bool:
        try:
            attributes = self.sftp.stat(name)
        except (OSError, paramiko.SSHException):
            return False

        return stat.S_ISDIR(attributes.st_mode or 0)

    def reset_directory(self):
        # A cwd of None means paths are resolved against the login directory.
        try:
            self.sftp.chdir(None)
        except (OSError, paramiko.SSHException) as e:
            raise ProvisionError("", e) from e

    def make_directory(self, name: str):
        try:
            self.sftp.mkdir(name, mode=0o775)
        except (OSError, paramiko.SSHException) as e:
            # Most servers answer a plain SSH_FX_FAILURE when the directory
            # exists, so look before deciding whether this is fatal.
            if self._is_directory(name):
                raise RemoteDirectoryExistsError(name) from e

            raise ProvisionError(name, e) from e

    def change_directory(self, name: str):
        try:
            self.sftp.chdir(name)
        except (OSError, paramiko.SSHException) as e:
            raise ProvisionError(name, e) from e

    def upload(self, local_path: Path):
        try:
            self.sftp.put(str(local_path), local_path.name)
        except (OSError, paramiko.SSHException) as e:
            raise TransferError(
                f"Could not upload {local_path} to {self.endpoint}: {e}"
            ) from e

    @property
    def current_directory(self) -> str:
        return self.sftp.getcwd() or "."

    def close(self):
        if self.closed:
            return

        self.closed = True

        # A failing sftp close must not keep the SSH transport open, nor hide
        # whatever error the connection is being closed after.
        try:
            self.sftp.close()
        except (OSError, paramiko.SSHException) as e:
            logger.warning("Error closing SFTP session to {}: {}", self.endpoint, e)
        finally:
            self.client.close()

        logger.debug("Closed connection to {}", self.endpoint)


class SFTPTransferManager(CoreTransferManager):
    user: str
    "User to log in as."
    host: str
    "Hostname of the server."
    port: int = 22
    "SSH port of the server."
    private_key_location: Optional[Path] = None
    "Private key to authenticate with. If None, paramiko looks for the usual keys."
    private_key_passphrase: Optional[str] = None
    "Passphrase of the private key."
    known_hosts_file: Optional[Path] = None
    "Known hosts file. If None, the system known hosts are used."
    timeout: Optional[float] = None
    "TCP connect timeout in seconds."

    @classmethod
    def from_settings(cls, settings: "ArchiverSettings") -> "SFTPTransferManager":
        method = settings.method

        return cls(
            user=method.user,
            host=method.host,
            port=method.port,
            private_key_location=method.private_key_location,
            private_key_passphrase=method.private_key_passphrase,
            known_hosts_file=method.known_hosts_file,
            timeout=method.timeout,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.user}@{self.host}:{self.port}"

    def connect(self) -> SFTPConnection:
        client = paramiko.SSHClient()

        try:
            if self.known_hosts_file is not None:
                client.load_host_keys(str(self.known_hosts_file))
            else:
                client.load_system_host_keys()

            # Unknown servers are never trusted.
            client.set_missing_host_key_policy(paramiko.RejectPolicy())

            client.connect(
                hostname=self.host,
                port=self.port,
                username=self.user,
                key_filename=(
                    str(self.private_key_location)
                    if self.private_key_location is not None
                    else None
                ),
                passphrase=self.private_key_passphrase,
                timeout=self.timeout,
                allow_agent=False,
                look_for_keys=self.private_key_location is None,
            )

            sftp = client.open_sftp()
        except (OSError, paramiko.SSHException) as e:
            client.close()
            raise RemoteConnectionError(self.endpoint, e) from e

        logger.debug("Opened connection to {}", self.endpoint)

        return SFTPConnection(client=client, sftp=sftp, endpoint=self.endpoint)
