import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

from sitedeploy.cli import main  # noqa: E402


def run() -> None:
    log_level = os.getenv("SITE_LOG_LEVEL", "info").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(main())


if __name__ == "__main__":
    run()
