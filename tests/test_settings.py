"""
Tests our ability to serialize/deserialize the archiver settings.
"""

import json

import pytest
from loguru import logger
from pydantic import ValidationError

from image_archiver.settings import (
    ArchiverSettings,
    LogSettings,
    MethodSettings,
    load_settings,
)
from image_archiver.transfers import LocalTransferManager


def test_defaults():
    settings = ArchiverSettings.model_validate({})

    assert settings.method.user == "intranda"
    assert settings.method.host == "intranda"
    assert settings.method.port == 22
    assert settings.method.private_key_location is None
    assert settings.folder == "master"
    assert settings.delete_and_close_after_copy is False
    assert settings.transfer_method == "sftp"


def test_camel_case_method_keys():
    method = MethodSettings.model_validate(
        {
            "user": "goobi",
            "privateKeyLocation": "/opt/digiverso/.ssh/id_rsa",
            "privateKeyPassphrase": "secret",
            "host": "archive.example.org",
            "port": 2222,
            "knownHostsFile": "/opt/digiverso/.ssh/known_hosts",
        }
    )

    assert str(method.private_key_location) == "/opt/digiverso/.ssh/id_rsa"
    assert method.private_key_passphrase == "secret"
    assert str(method.known_hosts_file) == "/opt/digiverso/.ssh/known_hosts"

    snake = MethodSettings.model_validate({"private_key_location": "/tmp/key"})

    assert str(snake.private_key_location) == "/tmp/key"


def test_as_configuration_keeps_extra_keys():
    method = MethodSettings.model_validate(
        {"host": "archive.example.org", "bucket": "images", "privateKeyLocation": "/k"}
    )

    assert method.as_configuration() == {
        "privateKeyLocation": "/k",
        "host": "archive.example.org",
        "bucket": "images",
    }


def test_as_configuration_leaves_out_defaults():
    """
    Only what was configured is reported, even where it equals a default.
    """

    assert MethodSettings.model_validate({}).as_configuration() == {}
    assert MethodSettings.model_validate({"user": "intranda"}).as_configuration() == {
        "user": "intranda"
    }


def test_settings_are_frozen():
    settings = ArchiverSettings.model_validate({})

    with pytest.raises(ValidationError):
        settings.folder = "media"

    with pytest.raises(ValidationError):
        settings.method.host = "elsewhere"


def test_invalid_transfer_method():
    with pytest.raises(ValidationError):
        ArchiverSettings.model_validate({"transfer_method": "ftp"})


def test_local_transfer_manager(tmp_path):
    settings = ArchiverSettings.model_validate(
        {"transfer_method": "local", "local_root": str(tmp_path)}
    )

    manager = settings.transfer_manager

    assert isinstance(manager, LocalTransferManager)
    assert manager.root == tmp_path


def test_local_transfer_manager_needs_root():
    settings = ArchiverSettings.model_validate({"transfer_method": "local"})

    with pytest.raises(ValueError):
        settings.transfer_manager


def test_from_file(tmp_path):
    path = tmp_path / "plugin_intranda_step_archiveimagefolder.json"

    with open(path, "w") as handle:
        json.dump(
            {
                "method": {"user": "goobi", "host": "archive.example.org"},
                "folder": "media",
                "delete_and_close_after_copy": True,
            },
            handle,
        )

    settings = ArchiverSettings.from_file(path)

    assert settings.method.user == "goobi"
    assert settings.folder == "media"
    assert settings.delete_and_close_after_copy is True


def test_load_settings_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "config.json"

    with open(path, "w") as handle:
        json.dump({"folder": "media"}, handle)

    monkeypatch.setenv("IMAGE_ARCHIVER_CONFIG_PATH", str(path))

    assert load_settings().folder == "media"


@pytest.mark.parametrize("key", ["deleteAndCloseAfterCopy", "delete_and_close_after_copy"])
def test_delete_and_close_after_copy_key(key):
    """
    The workflow config spells the flag in camelCase; both spellings load.
    """

    settings = ArchiverSettings.model_validate({key: True})

    assert settings.delete_and_close_after_copy is True


def test_from_file_workflow_keys(tmp_path):
    path = tmp_path / "config.json"

    with open(path, "w") as handle:
        json.dump(
            {
                "method": {
                    "user": "goobi",
                    "privateKeyLocation": "/opt/digiverso/.ssh/id_rsa",
                    "host": "archive.example.org",
                    "port": 22,
                    "knownHostsFile": "/opt/digiverso/.ssh/known_hosts",
                },
                "folder": "master",
                "deleteAndCloseAfterCopy": True,
            },
            handle,
        )

    settings = ArchiverSettings.from_file(path)

    assert settings.delete_and_close_after_copy is True
    assert str(settings.method.known_hosts_file) == "/opt/digiverso/.ssh/known_hosts"


def test_log_settings_file_sink(tmp_path):
    log_file = tmp_path / "archiver.log"

    handler_ids = LogSettings(files={log_file: "1 MB"}, file_level="INFO").setup_logs(
        "intranda_step_archiveimagefolder"
    )

    try:
        logger.debug("not written")
        logger.info("Archived process {}", 42)
        logger.complete()
    finally:
        for handler_id in handler_ids:
            logger.remove(handler_id)

    contents = log_file.read_text()

    assert len(handler_ids) == 1
    assert "Archived process 42" in contents
    assert "not written" not in contents


def test_log_settings_slack_needs_url():
    with pytest.raises(ValidationError):
        LogSettings(slack_webhook_enable=True)

    assert LogSettings().setup_logs("test") == []
