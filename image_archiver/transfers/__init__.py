"""
Transfer managers: the only thing the archiver needs to know about
the remote side.
"""

from .core import CoreConnection, CoreTransferManager
from .local import LocalConnection, LocalTransferManager
from .sftp import SFTPConnection, SFTPTransferManager

TransferManagers: dict[int, type[CoreTransferManager]] = {
    0: SFTPTransferManager,
    1: LocalTransferManager,
}

TransferManagerNames: dict[str, int] = {
    "sftp": 0,
    "local": 1,
}


def transfer_manager_from_name(name: str) -> type[CoreTransferManager]:
    """
    Get a transfer manager from its name.
    """
    return TransferManagers[TransferManagerNames[name]]
