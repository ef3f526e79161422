import asyncio
from concurrent.futures import Executor, ProcessPoolExecutor
from functools import partial
from typing import Iterable, Optional

from .api import Resolution, resolve_css_variables
from .config import load_settings
from .css_var_parser import Stylesheet

_executor: Optional[ProcessPoolExecutor] = None


def _get_executor() -> ProcessPoolExecutor:
    global _executor
    if _executor is None:
        _executor = ProcessPoolExecutor(load_settings().workers)
    return _executor


async def resolve_async(
    stylesheets: Iterable[Stylesheet],
    scope: Optional[str] = ":root",
    executor: Optional[Executor] = None,
) -> Resolution:
    return await asyncio.get_running_loop().run_in_executor(
        executor or _get_executor(),
        partial(resolve_css_variables, list(stylesheets), scope),
    )
