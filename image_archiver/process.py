"""
The bits of the workflow's process model that archiving needs.
"""

from pathlib import Path

from pydantic import BaseModel

from .exceptions import SourceFolderError


class Process(BaseModel):
    """
    A digitization process, identified by its id, with its image folders
    keyed by folder name (e.g. 'master', 'media').
    """

    id: int
    "Identifier of the process. Used as the top level directory on the archive."
    title: str = ""
    "Human readable title of the process."
    image_folders: dict[str, Path] = {}
    "Configured image folders of this process."

    def get_configured_image_folder(self, name: str) -> Path:
        """
        Resolve a configured image folder to an absolute path.

        Raises
        ------
        SourceFolderError
            If the process has no folder with this name.
        """

        if name not in self.image_folders:
            raise SourceFolderError(
                f"Process {self.id} has no image folder '{name}' "
                f"(configured: {sorted(self.image_folders)})"
            )

        return self.image_folders[name].absolute()


class Step(BaseModel):
    """
    The workflow step being executed.
    """

    process: Process

    @property
    def process_id(self) -> int:
        return self.process.id
