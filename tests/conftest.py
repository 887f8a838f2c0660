"""
Shared fixtures amongst all tests.
"""

import random
from pathlib import Path
from typing import Any

import pytest

from image_archiver.exceptions import TransferError
from image_archiver.journal import Journal, LogType
from image_archiver.process import Process
from image_archiver.settings import ArchiverSettings
from image_archiver.transfers import LocalConnection, LocalTransferManager

IMAGE_NAMES = ["a.tif", "b.tif", "c.tif"]


class RecordingJournal(Journal):
    """
    Journal that keeps every message it is given.
    """

    entries: list[tuple[int, LogType, str, str]] = []

    def add_message(self, process_id: int, log_type: LogType, message: str, title: str):
        self.entries.append((process_id, log_type, message, title))


class FlakyConnection(LocalConnection):
    """
    Local connection whose uploads start failing after fail_after files.
    """

    def __init__(self, root: Path, fail_after: int):
        super().__init__(root=root)
        self.fail_after = fail_after
        self.uploads = 0

    def upload(self, local_path: Path):
        if self.fail_after is not None and self.uploads >= self.fail_after:
            raise TransferError(f"Connection dropped while uploading {local_path}")

        super().upload(local_path)
        self.uploads += 1


class FlakyTransferManager(LocalTransferManager):
    """
    Local transfer manager that remembers its connections, and can be told
    to fail uploads part of the way through.
    """

    fail_after: int | None = None
    connections: list[Any] = []

    def connect(self) -> FlakyConnection:
        # Still fail if the root is missing.
        super().connect()

        connection = FlakyConnection(root=self.root, fail_after=self.fail_after)
        self.connections.append(connection)

        return connection


def fill_folder(folder: Path, names: list[str]) -> Path:
    folder.mkdir(parents=True, exist_ok=True)

    for name in names:
        with open(folder / name, "wb") as handle:
            handle.write(random.randbytes(1024))

    return folder


@pytest.fixture
def source_folder(tmp_path) -> Path:
    """
    A 'master' image folder with a few images in it.
    """

    yield fill_folder(tmp_path / "process" / "images" / "master", IMAGE_NAMES)


@pytest.fixture
def remote_root(tmp_path) -> Path:
    """
    Directory standing in for the login directory on the archive server.
    """

    path = tmp_path / "remote"
    path.mkdir()

    yield path


@pytest.fixture
def process(source_folder) -> Process:
    yield Process(id=42, title="test_process", image_folders={"master": source_folder})


@pytest.fixture
def journal() -> RecordingJournal:
    yield RecordingJournal()


@pytest.fixture
def make_settings(remote_root):
    """
    Returns a function building local-transfer settings, with overrides.
    """

    def make(**kwargs) -> ArchiverSettings:
        values = {"transfer_method": "local", "local_root": remote_root}
        values.update(kwargs)

        return ArchiverSettings.model_validate(values)

    yield make


@pytest.fixture
def flaky_manager(remote_root) -> FlakyTransferManager:
    yield FlakyTransferManager(root=remote_root)
