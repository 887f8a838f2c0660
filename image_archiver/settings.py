"""
Settings for the image archiver. This is a pydantic model deserialized
from the workflow step's config file.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import loguru
from notifiers.logging import NotificationHandler
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .transfers import CoreTransferManager, TransferManagerNames, transfer_manager_from_name

if TYPE_CHECKING:
    archiver_settings: "ArchiverSettings"


class MethodSettings(BaseModel):
    """
    Settings for the transfer method, i.e. how to reach the archive server.
    Keys may be given in camelCase (as in the workflow config) or snake_case.
    Unknown keys are kept, and end up in the archive manifest.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow", frozen=True
    )

    user: str = "intranda"
    "User to log in as on the archive server."
    private_key_location: Optional[Path] = None
    "Path to the private key used to authenticate."
    private_key_passphrase: Optional[str] = None
    "Passphrase for the private key, if it is encrypted."
    host: str = "intranda"
    "Hostname of the archive server."
    port: int = 22
    "SSH port of the archive server."
    known_hosts_file: Optional[Path] = None
    "Known hosts file to verify the server against. If None, the system one is used."
    timeout: Optional[float] = None
    "Timeout in seconds for opening the connection. None leaves it to paramiko."

    def as_configuration(self) -> dict[str, Any]:
        """
        The method configuration as it was given: only the keys that were
        actually supplied, camelCase, with null values dropped.
        """

        return self.model_dump(
            by_alias=True, exclude_unset=True, exclude_none=True, mode="json"
        )


class LogSettings(BaseModel):
    """
    Where archive logs go besides stderr: rotating files, and optionally a
    Slack channel for failures.
    """

    files: dict[Path, str] = {}
    "Log files to write, mapped to their rotation (e.g. 500 MB, 1 week)."
    file_level: str = "DEBUG"
    "Minimum level written to the log files."

    slack_webhook_enable: bool = False
    "Post messages at slack_webhook_level or above to Slack."
    slack_webhook_url: Optional[str] = None
    "Incoming webhook for the channel. Required when Slack is enabled."
    slack_webhook_level: str = "ERROR"

    @model_validator(mode="after")
    def slack_webhook_has_url(self) -> "LogSettings":
        if self.slack_webhook_enable and not self.slack_webhook_url:
            raise ValueError("slack_webhook_url is required when slack_webhook_enable is set")

        return self

    def setup_logs(self, step_title: str) -> list[int]:
        """
        Add the configured sinks to the logger. Returns the handler ids, so
        that they can be removed again.
        """

        handler_ids = [
            loguru.logger.add(file_name, rotation=rotation, level=self.file_level, enqueue=True)
            for file_name, rotation in self.files.items()
        ]

        if self.slack_webhook_enable:
            params = {
                "username": step_title,
                "icon_emoji": ":floppy_disk:",
                "webhook_url": self.slack_webhook_url,
            }

            format = (
                "Archiving *{level}* in `{name}:{line}`\n"
                "> *{message}*\n"
                "> {time: YYYY-MM-DD HH:mm:ss}\n"
            )

            handler_ids.append(
                loguru.logger.add(
                    NotificationHandler("slack", defaults=params),
                    level=self.slack_webhook_level,
                    format=format,
                )
            )

        return handler_ids


class ArchiverSettings(BaseSettings):
    """
    Settings for the archive step. Note that because this is a BaseSettings
    object, you can overwrite the values in the config file with environment
    variables.
    """

    # Where and how to upload.
    method: MethodSettings = Field(default_factory=MethodSettings)

    # Which of the process' configured image folders to archive.
    folder: str = "master"

    # Write the manifest and delete the local folder once uploaded. If not set,
    # the step reports that it should be retried later. The workflow config
    # spells it deleteAndCloseAfterCopy.
    delete_and_close_after_copy: bool = Field(
        False,
        validation_alias=AliasChoices(
            "deleteAndCloseAfterCopy", "delete_and_close_after_copy"
        ),
    )

    # Name of the transfer manager to use. 'local' treats local_root as the
    # remote server, for archive storage mounted on this machine.
    transfer_method: str = "sftp"
    local_root: Optional[Path] = None

    log_level: str = "INFO"
    log_settings: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(env_prefix="image_archiver_", frozen=True)

    @field_validator("transfer_method")
    def transfer_method_is_valid(cls, v: str) -> str:
        """
        Validates that the transfer method is one we know about.
        """

        if v not in TransferManagerNames:
            raise ValueError(
                f"Invalid transfer method {v}, choose from {list(TransferManagerNames)}"
            )

        return v

    @property
    def transfer_manager(self) -> CoreTransferManager:
        """
        The transfer manager described by these settings.
        """

        return transfer_manager_from_name(self.transfer_method).from_settings(self)

    @classmethod
    def from_file(cls, config_path: Path | str) -> "ArchiverSettings":
        """
        Loads the settings from the given path.
        """

        with open(config_path, "r") as handle:
            return cls.model_validate_json(handle.read())


# Automatically create a variable, archiver_settings, from the environment variable
# on _use_!

_settings = None


def load_settings() -> ArchiverSettings:
    """
    Load the settings from the config file.
    """

    global _settings

    try_paths = [
        os.environ.get("IMAGE_ARCHIVER_CONFIG_PATH", None),
    ]

    for path in try_paths:
        if path is not None:
            path = Path(path)
        else:
            continue

        if path.exists():
            try:
                _settings = ArchiverSettings.from_file(path)
            except ValidationError as e:
                loguru.logger.error("Error loading settings from {}: {}", path, e)
                raise e

            return _settings

    try:
        _settings = ArchiverSettings()
    except ValidationError as e:
        loguru.logger.error("Not all settings have defaults: {}", e)
        raise e

    return _settings


def __getattr__(name):
    """
    Try to load the settings if they haven't been loaded yet.
    """

    if name == "archiver_settings":
        global _settings

        if _settings is not None:
            return _settings

        return load_settings()

    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
