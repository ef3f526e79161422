import logging
from json import dumps
from typing import Optional

import requests
from click import ClickException, argument, command, echo, get_current_context, option

from .api import resolve_css_variables
from .config import load_settings
from .sources import load_all


@command(help="Resolve CSS custom properties declared in SOURCES (files or URLs).")
@argument("sources", nargs=-1, required=True)
@option("--scope", default=None, help="Exact selector to read variables from.")
@option("--unscoped", is_flag=True, help="Read variables from every rule.")
@option("--raw", "include_raw", is_flag=True, help="Include the raw values.")
@option("--strict", is_flag=True, help="Exit with status 1 if anything failed.")
def main(
    sources: tuple[str, ...],
    scope: Optional[str],
    unscoped: bool,
    include_raw: bool,
    strict: bool,
):
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, handlers=[logging.StreamHandler()])

    try:
        stylesheets = load_all(list(sources), settings.timeout)
    except (OSError, requests.RequestException) as e:
        raise ClickException(f"Could not load stylesheet: {e}")

    resolution = resolve_css_variables(
        stylesheets, None if unscoped else scope or settings.scope
    )
    for error in resolution.failures.values():
        logging.warning(error)
    echo(dumps(resolution.as_dict(raw=include_raw), indent=2))

    if strict and resolution.failures:
        get_current_context().exit(1)


if __name__ == "__main__":
    main()
