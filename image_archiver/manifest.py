"""
The archive manifest: the transfer method configuration plus the number of
images that were uploaded, written next to the archived folder once the
folder itself is gone.
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from .exceptions import PersistenceError
from .settings import MethodSettings

ROOT_ELEMENT = "configuration"
COUNT_ELEMENT = "numberOfImages"


def manifest_path(source_folder: Path) -> Path:
    """
    The manifest for a folder lives beside it, as <folder name>.xml.
    """

    return source_folder.parent / f"{source_folder.name}.xml"


class ArchiveManifest(BaseModel):
    """
    What was archived, and how.
    """

    method: dict[str, Any]
    "The transfer method configuration, keyed by configuration name."
    number_of_images: int
    "The number of files uploaded to the archive."

    @classmethod
    def from_method(cls, method: MethodSettings, number_of_images: int) -> "ArchiveManifest":
        return cls(method=method.as_configuration(), number_of_images=number_of_images)

    def to_element(self) -> ET.Element:
        root = ET.Element(ROOT_ELEMENT)

        for key, value in self.method.items():
            # The count below replaces any numberOfImages already in the method.
            if value is None or key == COUNT_ELEMENT:
                continue

            child = ET.SubElement(root, key)
            child.text = str(value).lower() if isinstance(value, bool) else str(value)

        ET.SubElement(root, COUNT_ELEMENT).text = str(self.number_of_images)

        return root

    def write(self, path: Path):
        """
        Write the manifest as XML.

        Raises
        ------
        PersistenceError
            If the document cannot be serialized or written.
        """

        try:
            tree = ET.ElementTree(self.to_element())
            ET.indent(tree)
            tree.write(path, encoding="UTF-8", xml_declaration=True)
        except (OSError, ValueError, TypeError) as e:
            raise PersistenceError(path, e) from e

    @classmethod
    def read(cls, path: Path) -> "ArchiveManifest":
        """
        Read a manifest back. Method values come back as strings.
        """

        try:
            root = ET.parse(path).getroot()
        except (OSError, ET.ParseError) as e:
            raise PersistenceError(path, e) from e

        method = {}
        number_of_images = None

        for child in root:
            if child.tag == COUNT_ELEMENT:
                try:
                    number_of_images = int(child.text)
                except (TypeError, ValueError) as e:
                    raise PersistenceError(path, e) from e
            else:
                method[child.tag] = child.text

        if number_of_images is None:
            raise PersistenceError(path, f"no {COUNT_ELEMENT} element")

        return cls(method=method, number_of_images=number_of_images)
