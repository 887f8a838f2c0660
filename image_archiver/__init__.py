"""
Archive image folders of digitization processes to a remote server.
"""

from .archiver import FolderArchiver, TransferSession
from .exceptions import (
    ArchiverError,
    PersistenceError,
    ProvisionError,
    RemoteConnectionError,
    SourceFolderError,
    TransferError,
)
from .manifest import ArchiveManifest
from .outcome import ArchiveState, StepOutcome
from .process import Process, Step
from .provision import RemotePathProvisioner
from .settings import ArchiverSettings, MethodSettings
from .step import ArchiveImageFolderStep

__all__ = [
    "ArchiveImageFolderStep",
    "ArchiveManifest",
    "ArchiverError",
    "ArchiverSettings",
    "ArchiveState",
    "FolderArchiver",
    "MethodSettings",
    "PersistenceError",
    "Process",
    "ProvisionError",
    "RemoteConnectionError",
    "RemotePathProvisioner",
    "SourceFolderError",
    "Step",
    "StepOutcome",
    "TransferError",
    "TransferSession",
]
