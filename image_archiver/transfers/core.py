"""
Core transfer manager and connection (prototypes).
"""

import abc
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from ..settings import ArchiverSettings


class CoreConnection(abc.ABC):
    """
    An open connection to a remote endpoint, with a current working
    directory. Use it as a context manager so that it is always closed,
    whatever happens inside the block.

    All paths handed to a connection are single names, relative to the
    current working directory.
    """

    def __enter__(self) -> "CoreConnection":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @abc.abstractmethod
    def reset_directory(self):
        """
        Change the working directory back to the root of the session.

        Raises
        ------
        ProvisionError
            If the root cannot be entered.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def make_directory(self, name: str):
        """
        Create a directory in the current working directory.

        Raises
        ------
        RemoteDirectoryExistsError
            If a directory with this name already exists.
        ProvisionError
            If the directory could not be created for any other reason.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def change_directory(self, name: str):
        """
        Change the working directory into a child directory.

        Raises
        ------
        ProvisionError
            If the directory cannot be entered.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def upload(self, local_path: Path):
        """
        Upload a local file into the current working directory, keeping
        its name.

        Raises
        ------
        TransferError
            If reading the local file or writing the remote one fails.
        """
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def current_directory(self) -> str:
        """
        The current working directory, for display purposes.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def close(self):
        """
        Release the connection. Must be safe to call more than once.
        """
        raise NotImplementedError


class CoreTransferManager(BaseModel, abc.ABC):
    """
    Prototype for transfer managers. A transfer manager describes how to
    reach an endpoint; connect() actually reaches it.
    """

    @classmethod
    @abc.abstractmethod
    def from_settings(cls, settings: "ArchiverSettings") -> "CoreTransferManager":
        """
        Build the transfer manager from the archiver settings.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def connect(self) -> CoreConnection:
        """
        Open a connection to the endpoint.

        Raises
        ------
        RemoteConnectionError
            If the connection cannot be established.
        """
        raise NotImplementedError
