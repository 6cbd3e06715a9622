"""
Section Rendering

Filters normalized rows to one section and renders each through a template.

Rows are rendered in collection order (entries are already sorted newest first),
and each block is followed by a separator. A section with no matching rows renders
as an empty fragment.
"""

from dataclasses import asdict
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from jinja2 import Template

from cvsheet.contexts.templating.defaults import BLOCK_SEPARATOR
from cvsheet.contexts.templating.template_registry import build_environment

ContextBuilder = Callable[[Any], Dict[str, Any]]

_environment = build_environment()


def default_context(row: Any) -> Dict[str, Any]:
    """Placeholder values straight from a dataclass row, with None as ""."""
    return {key: "" if value is None else value for key, value in asdict(row).items()}


def as_template(template: Union[str, Template]) -> Template:
    """Accept either compiled templates or template text."""
    if isinstance(template, Template):
        return template
    return _environment.from_string(template)


def in_section(rows: Iterable[Any], section_id: str) -> List[Any]:
    """Rows belonging to section_id that are flagged for inclusion."""
    return [row for row in rows if row.section == section_id and row.in_resume]


def render_rows(
    rows: Iterable[Any],
    template: Union[str, Template],
    context: Optional[ContextBuilder] = None,
    separator: str = BLOCK_SEPARATOR,
) -> str:
    """
    Render every row through template, appending separator after each block.

    Args:
        rows: Rows to render, in output order
        template: Template text or compiled template
        context: Builds placeholder values for a row (default: its dataclass fields)
        separator: Text appended after each rendered block

    Returns:
        Concatenated fragment ("" when there are no rows)
    """
    compiled = as_template(template)
    context = context or default_context
    return "".join(compiled.render(context(row)) + separator for row in rows)


def render_section(
    rows: Iterable[Any],
    section_id: str,
    template: Union[str, Template],
    context: Optional[ContextBuilder] = None,
    separator: str = BLOCK_SEPARATOR,
) -> str:
    """
    Render the rows of one section.

    Keeps rows where section == section_id and in_resume is true, then renders
    them with render_rows(). Placeholders with no value render as "".

    Example:
        >>> render_section(entries, "work", "### {title}\\n{timeline}")
    """
    return render_rows(in_section(rows, section_id), template, context, separator)
