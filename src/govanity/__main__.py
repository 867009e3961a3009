from __future__ import annotations

import argparse
import logging
import sys

from govanity.config import DEFAULT_CONFIG_PATH, load_config
from govanity.errors import GovanityError
from govanity.lifecycle import run

logger = logging.getLogger("govanity")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Go vanity import redirector")
    p.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="path to config")
    p.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="logging level (default: INFO)",
    )

    args = p.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    try:
        config = load_config(args.config)
        return run(config)
    except GovanityError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
