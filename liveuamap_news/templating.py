"""Jinja2 environment for liveuamap_news templates."""

from __future__ import annotations

from importlib import resources

from jinja2 import Environment, FileSystemLoader, select_autoescape

_ENV: Environment | None = None


def _hyperlink(label: str, url: str) -> str:
    """Render a markdown link the way Discord expects it."""
    return f"[{label}]({url})"


def _quote(value: str | None) -> str:
    if not value:
        return ""
    return "\n".join(f"> {line}" for line in value.splitlines())


def get_environment() -> Environment:
    """Return a cached Jinja environment configured for package templates."""
    global _ENV
    if _ENV is None:
        template_dir = resources.files(__package__) / "templates"
        loader = FileSystemLoader(str(template_dir))
        _ENV = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        _ENV.filters["quote"] = _quote
        _ENV.globals["hyperlink"] = _hyperlink
    return _ENV
