"""
The workflow step plugin. Ties the step being executed to a FolderArchiver
built from the step's settings.
"""

from typing import Optional

from loguru import logger

from .archiver import STEP_TITLE, FolderArchiver
from .journal import Journal
from .outcome import StepOutcome
from .process import Step
from .settings import ArchiverSettings


class ArchiveImageFolderStep:
    """
    Archives an image folder of the process the step belongs to. Call
    initialize() once, then run() or execute().
    """

    title: str = STEP_TITLE

    def __init__(self, journal: Optional[Journal] = None):
        self.journal = journal
        self.step: Optional[Step] = None
        self.archiver: Optional[FolderArchiver] = None

    def initialize(self, step: Step, settings: Optional[ArchiverSettings] = None):
        """
        Bind the plugin to a step. If no settings are given, they are loaded
        from IMAGE_ARCHIVER_CONFIG_PATH (or the environment).
        """

        if settings is None:
            from .settings import archiver_settings as settings

        self.step = step
        self.archiver = FolderArchiver.from_settings(settings, journal=self.journal)

    def run(self) -> StepOutcome:
        if self.step is None or self.archiver is None:
            raise RuntimeError("initialize() must be called before run()")

        outcome = self.archiver.run(self.step.process)

        logger.debug("Archiveimagefolder step executed with outcome {}", outcome.name)

        return outcome

    def execute(self) -> bool:
        """
        Run the step, returning False only if it failed.
        """

        return self.run() != StepOutcome.FAILED
