"""
Tests writing and reading the archive manifest.
"""

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from image_archiver.exceptions import PersistenceError
from image_archiver.manifest import ArchiveManifest, manifest_path
from image_archiver.settings import MethodSettings


def test_manifest_path():
    assert manifest_path(Path("/data/1/images/test_master")) == Path(
        "/data/1/images/test_master.xml"
    )


def test_write(tmp_path):
    method = MethodSettings.model_validate(
        {"user": "goobi", "privateKeyLocation": "/k", "compress": True}
    )
    path = tmp_path / "master.xml"

    ArchiveManifest.from_method(method, 12).write(path)

    root = ET.parse(path).getroot()

    assert root.tag == "configuration"
    assert [child.tag for child in root] == [
        "user",
        "privateKeyLocation",
        "compress",
        "numberOfImages",
    ]
    assert root.find("compress").text == "true"
    assert root.find("numberOfImages").text == "12"
    assert path.read_text().startswith("<?xml")


def test_count_replaces_configured_count(tmp_path):
    """
    A numberOfImages already in the method block is replaced, not repeated.
    """

    method = MethodSettings.model_validate({"host": "h", "numberOfImages": 5})
    path = tmp_path / "master.xml"

    ArchiveManifest.from_method(method, 2).write(path)

    root = ET.parse(path).getroot()

    assert [child.tag for child in root] == ["host", "numberOfImages"]
    assert [child.text for child in root.iter("numberOfImages")] == ["2"]
    assert ArchiveManifest.read(path).number_of_images == 2


def test_read_back(tmp_path):
    path = tmp_path / "master.xml"

    ArchiveManifest(method={"user": "goobi", "port": 22}, number_of_images=3).write(path)

    manifest = ArchiveManifest.read(path)

    assert manifest.number_of_images == 3
    assert manifest.method == {"user": "goobi", "port": "22"}


def test_write_failure(tmp_path):
    with pytest.raises(PersistenceError):
        ArchiveManifest(method={}, number_of_images=0).write(tmp_path / "gone" / "master.xml")


def test_read_without_count(tmp_path):
    path = tmp_path / "master.xml"
    path.write_text("<configuration><user>goobi</user></configuration>")

    with pytest.raises(PersistenceError):
        ArchiveManifest.read(path)
