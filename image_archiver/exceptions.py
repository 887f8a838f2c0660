"""
Exceptions for the image_archiver library.

Everything raised on purpose by the archiver derives from ArchiverError, so
that the workflow step can turn it into a failed outcome. Anything else is a
bug and is allowed to propagate.
"""


class ArchiverError(Exception):
    def __init__(self, message):
        super(ArchiverError, self).__init__(message)


class RemoteConnectionError(ArchiverError):
    """
    Could not open a connection to the remote endpoint (authentication,
    network, or host key mismatch).
    """

    def __init__(self, endpoint, reason):
        super(RemoteConnectionError, self).__init__(
            f"Could not connect to {endpoint}: {reason}"
        )
        self.endpoint = endpoint
        self.reason = reason


class TransferError(ArchiverError):
    """
    A local read or remote write failed while moving data.
    """


class ProvisionError(TransferError):
    """
    A remote directory could not be created or entered.
    """

    def __init__(self, segment, reason):
        super(ProvisionError, self).__init__(
            f"Could not provision remote directory {segment!r}: {reason}"
        )
        self.segment = segment
        self.reason = reason


class RemoteDirectoryExistsError(ProvisionError):
    """
    The remote directory already exists. Not fatal while provisioning.
    """

    def __init__(self, segment):
        super(RemoteDirectoryExistsError, self).__init__(segment, "already exists")


class SourceFolderError(TransferError):
    """
    The local source folder could not be resolved or listed.
    """


class PersistenceError(ArchiverError):
    """
    The archive manifest could not be serialized or written.
    """

    def __init__(self, path, reason):
        super(PersistenceError, self).__init__(
            f"Could not write archive manifest to {path}: {reason}"
        )
        self.path = path
        self.reason = reason
