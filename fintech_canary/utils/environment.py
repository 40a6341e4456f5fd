import logging
import os

from fintech_canary.utils import config

CANARY_CONFIG = "CANARY_CONFIG"
CANARY_LOG_LEVEL = "CANARY_LOG_LEVEL"

LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_FMT = "[%(asctime)s] [%(levelname)s] [%(filename)s:%(funcName)s:%(lineno)d] - %(message)s"


def init_env(
    log_level: str | None = None,
    config_file: str | None = None,
) -> None:
    # store env configs in environment variables so child processes
    # inherit them and init_env() without parameters gives the same setup.
    if log_level:
        os.environ[CANARY_LOG_LEVEL] = log_level
    if config_file:
        os.environ[CANARY_CONFIG] = config_file

    logging.basicConfig(
        format=LOG_FMT,
        datefmt=LOG_DATEFMT,
        level=getattr(logging, os.environ.get(CANARY_LOG_LEVEL, "INFO").upper()),
    )

    config_file = os.environ.get(CANARY_CONFIG)
    if config_file:
        config.init_from_toml(config_file)
    else:
        config.init({})
