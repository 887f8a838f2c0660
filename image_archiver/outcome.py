"""
StepOutcome and ArchiveState enums.
"""

from enum import Enum


class StepOutcome(Enum):
    """
    The result of one archive attempt, as reported to the workflow.
    """

    FAILED = "error"
    "Transfer or finalize failed. The workflow decides whether to re-run the step."
    SUCCESS = "finish"
    "Files were uploaded, the manifest written and the local folder removed."
    RETRY_LATER = "wait"
    "Files were uploaded but finalizing is deferred to a later invocation."

    def __str__(self):
        return self.value


class ArchiveState(Enum):
    """
    The state of a single transfer session. Sessions only ever move forward;
    any non-terminal state may move to FAILED.
    """

    START = 0
    "Session created, nothing has happened yet."
    CONNECTED = 1
    "A connection to the remote endpoint is open."
    PROVISIONED = 2
    "The remote target directory exists and is the working directory."
    UPLOADING = 3
    "Files are being uploaded."
    UPLOADED = 4
    "Every file in the source folder was uploaded and the connection released."
    FINALIZED = 5
    "Manifest written and local folder deleted."
    DEFERRED = 6
    "Upload complete, finalizing left to a later invocation."
    FAILED = 7
    "Something went wrong. See the session's error."

    @property
    def terminal(self) -> bool:
        return self in (ArchiveState.FINALIZED, ArchiveState.DEFERRED, ArchiveState.FAILED)


ALLOWED_TRANSITIONS: dict[ArchiveState, tuple[ArchiveState, ...]] = {
    ArchiveState.START: (ArchiveState.CONNECTED,),
    ArchiveState.CONNECTED: (ArchiveState.PROVISIONED,),
    ArchiveState.PROVISIONED: (ArchiveState.UPLOADING,),
    ArchiveState.UPLOADING: (ArchiveState.UPLOADED,),
    ArchiveState.UPLOADED: (ArchiveState.FINALIZED, ArchiveState.DEFERRED),
}

OUTCOMES: dict[ArchiveState, StepOutcome] = {
    ArchiveState.FINALIZED: StepOutcome.SUCCESS,
    ArchiveState.DEFERRED: StepOutcome.RETRY_LATER,
    ArchiveState.FAILED: StepOutcome.FAILED,
}
