from os import getenv
from typing import NamedTuple

from dotenv import load_dotenv

DEFAULT_SCOPE = ":root"


class Settings(NamedTuple):
    scope: str = DEFAULT_SCOPE
    log_level: str = "WARNING"
    timeout: float = 10
    workers: int = 1


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        scope=getenv("CSS_VARS_SCOPE", DEFAULT_SCOPE),
        log_level=getenv("CSS_VARS_LOG_LEVEL", "WARNING").upper(),
        timeout=float(getenv("CSS_VARS_TIMEOUT", "10")),
        workers=int(getenv("CSS_VARS_WORKERS", "1")),
    )
