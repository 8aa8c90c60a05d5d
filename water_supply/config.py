import os
import logging
from dataclasses import dataclass

DEFAULT_SOURCE = 'SuperSource'
DEFAULT_TARGET = 'SuperSink'

LOG_FORMAT = '[%(asctime)s] %(levelname)s: %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from environment variables."""
    source_code: str = DEFAULT_SOURCE
    target_code: str = DEFAULT_TARGET
    log_level: str = 'INFO'


def get_settings() -> Settings:
    """Read settings from the environment, falling back to defaults."""
    return Settings(
        source_code=os.getenv('WATER_SUPPLY_SOURCE', DEFAULT_SOURCE),
        target_code=os.getenv('WATER_SUPPLY_TARGET', DEFAULT_TARGET),
        log_level=os.getenv('WATER_SUPPLY_LOG_LEVEL', 'INFO').upper(),
    )


def configure_logging(level: str = None):
    """Configure root logging with the package format."""
    if level is None:
        level = get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT
    )
