"""Templates for the book's index pages."""

from __future__ import annotations

import re
from pathlib import Path

from mdbinder.core.errors import ConfigError

# Pattern for {{variable}} template placeholders
_TEMPLATE_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")

DEFAULT_README_TEMPLATE = """\
# {{project}}

Documentation collected from the repositories of project {{project}}.
See the table of contents in [SUMMARY.md](SUMMARY.md).
"""

DEFAULT_SUMMARY_TEMPLATE = """\
# Summary

* [Introduction](README.md)
{{entries}}"""


def resolve_template(template: str, values: dict[str, str]) -> str:
    """Resolve {{variable}} placeholders in a template.

    Unresolvable placeholders are replaced with empty string.
    """

    def replacer(match: re.Match[str]) -> str:
        return values.get(match.group(1), "")

    return _TEMPLATE_PATTERN.sub(replacer, template)


def load_template(path: str | None, default: str) -> str:
    """Read a template file, or return `default` when no path is configured."""
    if path is None:
        return default
    try:
        return Path(path).expanduser().read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read template {path}: {e}") from e
