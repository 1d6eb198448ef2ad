"""Writes the build id used to cache-bust static assets.

Run before deploying:

    python -m website.build_id
"""

import logging
import pathlib
import time

import common.settings

logger = logging.getLogger(__name__)


def write_build_id(path: pathlib.Path) -> str:
    """Write the current time in epoch milliseconds to path and return it."""
    build_id = str(time.time_ns() // 1_000_000)
    path.write_text(build_id, encoding='utf-8')
    return build_id


def read_build_id(path: pathlib.Path) -> str | None:
    """Return the build id stored at path, or None if there is none."""
    if not path.is_file():
        return None
    return path.read_text(encoding='utf-8').strip() or None


def main() -> None:
    """Write a fresh build id to the configured location."""
    logging.basicConfig(level=logging.INFO)
    settings = common.settings.load_settings()
    build_id = write_build_id(settings.build_id_path)
    logger.info('Wrote build id %s to %s', build_id, settings.build_id_path)


if __name__ == '__main__':
    main()
