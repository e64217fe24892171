# -*- coding: utf-8 -*-

from .__version__ import __version__  # noqa

import logging

from .common import config
from .common import log
from .greeting import run_demo


def main():
    """Entry point of the greeting demo."""

    # Start log and load config
    with log.Context():
        logger = logging.getLogger(__name__)
        logger.debug('settle %s', __version__)

        config.load()
        log.set_debug_mode(config.get('debug_mode'))
        log.set_logs_level(config.get('log_levels'))

        run_demo(config.get('greeting_delay'))


if __name__ == "__main__":
    main()
