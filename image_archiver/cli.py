"""
Command-line script to archive the image folder of a single process, for
use outside of the workflow engine (e.g. from cron or by hand).
"""

import argparse as ap
import sys
from pathlib import Path

import loguru

from .exceptions import ArchiverError
from .outcome import StepOutcome
from .process import Process, Step
from .settings import ArchiverSettings, load_settings
from .step import ArchiveImageFolderStep


def build_parser() -> ap.ArgumentParser:
    parser = ap.ArgumentParser(
        description=(
            "Upload an image folder to the archive server. Depending on the "
            "configuration, also write the archive manifest and delete the folder."
        )
    )

    parser.add_argument(
        "--config",
        help=(
            "Path to the JSON settings file. Defaults to IMAGE_ARCHIVER_CONFIG_PATH, "
            "or the environment if that is not set."
        ),
        type=Path,
        default=None,
    )

    parser.add_argument(
        "--process-id",
        help="Identifier of the process. Used as the top level directory on the archive.",
        type=int,
        required=True,
    )

    parser.add_argument(
        "--folder-path",
        help="The image folder to archive.",
        type=Path,
        required=True,
    )

    parser.add_argument(
        "--process-title",
        help="Title of the process, for the logs.",
        type=str,
        default="",
    )

    return parser


def setup_logging(settings: ArchiverSettings):
    loguru.logger.remove()
    loguru.logger.add(sys.stderr, level=settings.log_level)

    settings.log_settings.setup_logs(ArchiveImageFolderStep.title)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    settings = (
        ArchiverSettings.from_file(args.config)
        if args.config is not None
        else load_settings()
    )

    setup_logging(settings)

    process = Process(
        id=args.process_id,
        title=args.process_title,
        image_folders={settings.folder: args.folder_path},
    )

    plugin = ArchiveImageFolderStep()

    try:
        plugin.initialize(Step(process=process), settings)
    except (ArchiverError, ValueError) as e:
        loguru.logger.error("Could not set up the archive step: {}", e)
        return 1

    outcome = plugin.run()

    print(outcome.name)

    return 1 if outcome == StepOutcome.FAILED else 0


if __name__ == "__main__":
    sys.exit(main())
