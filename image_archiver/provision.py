"""
Making sure a nested remote directory exists before uploading into it.
"""

from pathlib import PurePosixPath
from typing import Sequence

from loguru import logger

from .exceptions import ProvisionError, RemoteDirectoryExistsError
from .transfers import CoreConnection


def remote_target_path(process_id: int, folder_name: str) -> PurePosixPath:
    """
    Where the images of a process end up on the archive server, relative to
    the login directory: <process_id>/images/<folder_name>.
    """

    return PurePosixPath(str(process_id), "images", folder_name)


def split_remote_path(path: PurePosixPath | str) -> list[str]:
    """
    Split a relative remote path into its segments, dropping empty ones.
    """

    return [segment for segment in str(path).split("/") if segment]


class RemotePathProvisioner:
    """
    Creates a remote directory path segment by segment, and leaves the
    connection sitting in the deepest one.
    """

    def __init__(self, connection: CoreConnection):
        self.connection = connection

    def ensure_path(self, segments: Sequence[str]):
        """
        Create (if needed) and enter each segment in order, starting from
        the root of the session. Segments that already exist are fine, so
        calling this twice gets you to the same place.

        Parameters
        ----------
        segments : Sequence[str]
            Directory names, outermost first. Must be non-empty, and no
            name may be empty or contain a '/'.

        Raises
        ------
        ProvisionError
            If the segments are invalid, or a directory could not be
            created or entered. Directories created before the failure
            are left in place.
        """

        if not segments:
            raise ProvisionError("", "no path segments given")

        for segment in segments:
            if not segment or "/" in segment:
                raise ProvisionError(segment, "not a valid path segment")

        self.connection.reset_directory()

        for segment in segments:
            try:
                self.connection.make_directory(segment)
                logger.debug(
                    "Created remote directory {} in {}",
                    segment,
                    self.connection.current_directory,
                )
            except RemoteDirectoryExistsError:
                logger.debug("Remote directory {} already exists", segment)

            self.connection.change_directory(segment)
