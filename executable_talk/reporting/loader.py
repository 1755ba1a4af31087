"""
Report template loading.

Failure reports are plain-text jinja2 templates kept next to this module.
Every ``Template`` constant is checked against the templates directory at
import, so a renamed file breaks loudly instead of at the first failure.
"""

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .templates import Template

TEMPLATES_DIR = Path(__file__).parent / "templates"
TEMPLATE_SUFFIX = ".jinja2"


def template_path(template_name: str) -> Path:
    return TEMPLATES_DIR / f"{template_name}{TEMPLATE_SUFFIX}"


def _check_templates() -> None:
    missing = [
        template_path(value)
        for key, value in vars(Template).items()
        if not key.startswith("_") and not template_path(value).exists()
    ]
    if missing:
        raise FileNotFoundError(f"Report template(s) missing: {', '.join(map(str, missing))}")


_check_templates()


@lru_cache(maxsize=1)
def _environment() -> Environment:
    # Reports are terminal/notice text, never HTML
    return Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render(template_name: str, **context) -> str:
    """
    Renders one report template.

    Args:
        template_name: A ``Template`` constant
        **context: Template variables; referencing one that was not passed raises

    Returns:
        The rendered text without leading or trailing blank lines
    """
    template = _environment().get_template(f"{template_name}{TEMPLATE_SUFFIX}")
    return template.render(**context).strip()
