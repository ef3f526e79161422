import logging
from pathlib import Path

import requests

log = logging.getLogger(__name__)


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load(source: str, timeout: float = 10) -> str:
    if is_url(source):
        log.info("Fetching %s", source)
        r = requests.get(source, timeout=timeout)
        r.raise_for_status()
        return r.text
    return Path(source).read_text(encoding="utf-8")


def load_all(sources: list[str], timeout: float = 10) -> list[str]:
    return [load(source, timeout) for source in sources]
