import asyncio
from concurrent.futures import ThreadPoolExecutor

from css_vars.async_resolve import resolve_async

THEME = ":root { --size: calc(var(--base) * 2); --base: 4px; --bad: var(--nope); }"


def test_resolve_async_in_process_pool():
    resolution = asyncio.run(resolve_async([THEME]))

    assert resolution.resolved == {"--base": "4px", "--size": "8px"}
    assert resolution.failed == ["--nope", "--bad"]


def test_resolve_async_with_executor():
    async def main():
        with ThreadPoolExecutor(2) as executor:
            return await asyncio.gather(
                resolve_async([THEME], executor=executor),
                resolve_async([THEME], ".missing", executor=executor),
            )

    root, missing = asyncio.run(main())

    assert root.resolved["--size"] == "8px"
    assert missing.resolved == {}
    assert missing.raw == {}
