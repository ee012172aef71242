"""
Jinja2 environment for the console reports.

Templates live in the package's ``templates/`` directory and are rendered
with ``StrictUndefined`` so a missing variable fails loudly.
"""

import logging
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined

from .languages_config import get_language_name

logger = logging.getLogger(__name__)


def quote_filter(value: Any) -> str:
    """Render a value in double quotes, as the console output shows texts."""
    return f'"{value}"'


def create_jinja_env() -> Environment:
    """
    Create the Jinja2 environment used for text reports.

    Returns:
        Configured Jinja2 Environment.
    """
    env = Environment(
        loader=PackageLoader("i18n_sync", "templates"),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
        undefined=StrictUndefined,
    )

    env.filters["lang_name"] = get_language_name
    env.filters["quote"] = quote_filter

    logger.debug("Created Jinja2 environment for report templates")
    return env


def render(template_name: str, **context: Any) -> str:
    """Render a packaged template with the given context."""
    return create_jinja_env().get_template(template_name).render(**context)
