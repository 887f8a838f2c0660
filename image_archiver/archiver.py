"""
Archives one image folder of a process: upload everything in it to the
archive server, then either finalize (write the manifest, delete the local
folder) or leave it for a later run.
"""

import shutil
from pathlib import Path, PurePosixPath
from typing import Optional

from loguru import logger
from pydantic import BaseModel, Field

from .exceptions import ArchiverError, PersistenceError, SourceFolderError
from .journal import Journal, LoggingJournal, LogType
from .manifest import ArchiveManifest, manifest_path
from .outcome import ALLOWED_TRANSITIONS, OUTCOMES, ArchiveState, StepOutcome
from .process import Process
from .provision import RemotePathProvisioner, remote_target_path, split_remote_path
from .settings import ArchiverSettings
from .transfers import CoreTransferManager

STEP_TITLE = "intranda_step_archiveimagefolder"


class TransferSession(BaseModel):
    """
    The state of one archive attempt. Lives only as long as the attempt.
    """

    process_id: int
    "The process whose folder is being archived."
    source_folder: Optional[Path] = None
    "The local folder being archived, once resolved."
    remote_path: Optional[PurePosixPath] = None
    "Where the files go, relative to the remote login directory."
    uploaded_files: int = 0
    "Number of files uploaded so far. Files uploaded before a failure are counted."
    state: ArchiveState = ArchiveState.START
    "Where in the archive process we are."
    error: Optional[str] = None
    "What went wrong, if the session failed."

    def advance(self, state: ArchiveState):
        if state not in ALLOWED_TRANSITIONS.get(self.state, ()):
            raise RuntimeError(f"Cannot move transfer session from {self.state} to {state}")

        logger.debug("Process {}: {} -> {}", self.process_id, self.state.name, state.name)

        self.state = state

    def fail(self, error: Exception):
        if self.state.terminal:
            raise RuntimeError(f"Cannot fail a transfer session that is already {self.state}")

        logger.debug("Process {}: {} -> FAILED", self.process_id, self.state.name)

        self.state = ArchiveState.FAILED
        self.error = str(error)

    @property
    def outcome(self) -> StepOutcome:
        if self.state not in OUTCOMES:
            raise RuntimeError(f"Transfer session is still in progress ({self.state})")

        return OUTCOMES[self.state]


def list_source_files(folder: Path) -> list[Path]:
    """
    The regular files directly inside folder, sorted by name. Subdirectories
    are not descended into.

    Raises
    ------
    SourceFolderError
        If the folder cannot be listed.
    """

    try:
        return sorted(path for path in folder.iterdir() if path.is_file())
    except OSError as e:
        raise SourceFolderError(f"Could not list source folder {folder}: {e}") from e


def delete_quietly(folder: Path):
    """
    Remove a folder and everything in it, ignoring any errors.
    """

    shutil.rmtree(folder, ignore_errors=True)

    if folder.exists():
        logger.warning("Could not completely delete local folder {}", folder)


class FolderArchiver(BaseModel):
    """
    Runs archive attempts. Holds no state between attempts, so the same
    archiver can be used again for the same folder (which will upload
    everything again).
    """

    settings: ArchiverSettings
    "Immutable configuration for the step."
    transfer_manager: CoreTransferManager
    "How to reach the archive server."
    journal: Journal = Field(default_factory=LoggingJournal)
    "Where failure messages for the process go."
    title: str = STEP_TITLE
    "Name used when writing to the journal."

    @classmethod
    def from_settings(
        cls, settings: ArchiverSettings, journal: Optional[Journal] = None
    ) -> "FolderArchiver":
        return cls(
            settings=settings,
            transfer_manager=settings.transfer_manager,
            journal=journal if journal is not None else LoggingJournal(),
        )

    def resolve_source_folder(self, process: Process) -> Path:
        folder = process.get_configured_image_folder(self.settings.folder)

        if not folder.is_dir():
            raise SourceFolderError(f"Source folder {folder} is not a directory")

        return folder

    def upload(self, session: TransferSession):
        """
        Upload everything in the session's source folder. The connection is
        closed before this returns, whether or not the upload worked.

        Raises
        ------
        RemoteConnectionError
            If the archive server cannot be reached.
        TransferError
            If the remote path cannot be provisioned or a file cannot be
            uploaded. Files uploaded up to that point stay on the server.
        """

        with self.transfer_manager.connect() as connection:
            session.advance(ArchiveState.CONNECTED)

            RemotePathProvisioner(connection).ensure_path(
                split_remote_path(session.remote_path)
            )
            session.advance(ArchiveState.PROVISIONED)

            files = list_source_files(session.source_folder)
            session.advance(ArchiveState.UPLOADING)

            for path in files:
                connection.upload(path)
                session.uploaded_files += 1
                logger.debug(
                    "Uploaded {} to {} ({}/{})",
                    path.name,
                    connection.current_directory,
                    session.uploaded_files,
                    len(files),
                )

        session.advance(ArchiveState.UPLOADED)

    def finalize(self, session: TransferSession):
        """
        Write the manifest next to the source folder, then delete the folder.
        The folder is only deleted if the manifest was written.

        Raises
        ------
        PersistenceError
            If the manifest cannot be written.
        """

        manifest = ArchiveManifest.from_method(self.settings.method, session.uploaded_files)
        path = manifest_path(session.source_folder)

        manifest.write(path)
        logger.info("Wrote archive manifest {}", path)

        delete_quietly(session.source_folder)

        session.advance(ArchiveState.FINALIZED)

    def fail(self, session: TransferSession, error: ArchiverError, message: str) -> TransferSession:
        logger.error("Archiving images of process {} failed: {}", session.process_id, error)

        session.fail(error)
        self.journal.add_message(session.process_id, LogType.ERROR, message, self.title)

        return session

    def archive(self, process: Process) -> TransferSession:
        """
        Run one archive attempt for the configured image folder of a process.

        Parameters
        ----------
        process : Process
            The process to archive. Its image folder named in the settings
            is uploaded to <process id>/images/<folder name>.

        Returns
        -------
        TransferSession
            The finished session. Its outcome is SUCCESS if the folder was
            finalized, RETRY_LATER if finalizing is switched off, and FAILED
            if anything went wrong.
        """

        session = TransferSession(process_id=process.id)

        try:
            session.source_folder = self.resolve_source_folder(process)
            session.remote_path = remote_target_path(process.id, session.source_folder.name)

            logger.info(
                "Archiving {} to {} for process {}",
                session.source_folder,
                session.remote_path,
                process.id,
            )

            self.upload(session)
        except ArchiverError as e:
            return self.fail(session, e, "Error uploading files")

        logger.info(
            "Uploaded {} files from {} for process {}",
            session.uploaded_files,
            session.source_folder,
            process.id,
        )

        if not self.settings.delete_and_close_after_copy:
            session.advance(ArchiveState.DEFERRED)
            return session

        try:
            self.finalize(session)
        except PersistenceError as e:
            return self.fail(session, e, "Error saving archive information to images folder")

        return session

    def run(self, process: Process) -> StepOutcome:
        return self.archive(process).outcome
