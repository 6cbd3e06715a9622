"""
Default section templates and placeholder values.

Templates use single-brace placeholders ({title}) and contain no logic. Each
section kind has a context builder that computes every placeholder value up front,
including the conditional ones (loc_or_description, institution_line, icon_style).

Template kinds:
- entries: positions, degrees, publications from the entries table
- output: talks, posters, software from the output table
- list: bare facts with an icon from the list table
- contact_info: icon + contact lines
- side: free-form sidebar blocks
"""

from dataclasses import asdict
from typing import Any, Dict, Optional

from cvsheet.contexts.intake.records import ContactInfoItem, ListItem
from cvsheet.contexts.templating.normalizer import (
    MISSING,
    NormalizedEntry,
    OutputEntry,
    SideEntry,
)

# Appended after every rendered block; three blank lines reset markdown indentation
BLOCK_SEPARATOR = "\n\n\n"
LINE_SEPARATOR = "\n"

ENTRIES_TEMPLATE = """### {title}

{loc_or_description}

{institution_line}

{timeline}

{description_bullets}

{extras}
"""

# ">" indents (spaces do not survive the markdown renderer), "<br>" breaks lines
OUTPUT_TEMPLATE = """> {title}<br>

> > {institution_bullets}
<br>
"""

LIST_TEMPLATE = "> <i class='fa fa-{icon}'{icon_style}></i> {item}"

CONTACT_INFO_TEMPLATE = "- <i class='fa fa-{icon}'{icon_style}></i> {contact}"

SIDE_TEMPLATE = "{entry_bullets}\n"

DEFAULT_TEMPLATES = {
    "entries": ENTRIES_TEMPLATE,
    "output": OUTPUT_TEMPLATE,
    "list": LIST_TEMPLATE,
    "contact_info": CONTACT_INFO_TEMPLATE,
    "side": SIDE_TEMPLATE,
}

# Entries, output and side blocks are multi-line; list and contact lines stack
DEFAULT_SEPARATORS = {
    "entries": BLOCK_SEPARATOR,
    "output": BLOCK_SEPARATOR,
    "list": LINE_SEPARATOR,
    "contact_info": LINE_SEPARATOR,
    "side": BLOCK_SEPARATOR,
}

TEMPLATE_KINDS = tuple(DEFAULT_TEMPLATES)


def _blank_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: "" if value is None else value for key, value in values.items()}


def icon_style(icon_color: Optional[str]) -> str:
    """Inline style attribute for icons, or "" when no colour is configured."""
    return f" style='color: {icon_color};'" if icon_color else ""


def entry_context(entry: NormalizedEntry) -> Dict[str, Any]:
    """
    Placeholder values for an entries block.

    loc_or_description falls back to the description bullets when the entry has no
    location; institution_line is blank when the entry has no institution.
    """
    context = asdict(entry)
    context["loc_or_description"] = (
        entry.loc if entry.loc != MISSING else entry.description_bullets
    )
    context["institution_line"] = entry.institution if entry.institution != MISSING else ""
    return context


def output_context(entry: OutputEntry) -> Dict[str, Any]:
    return _blank_none(asdict(entry))


def side_context(entry: SideEntry) -> Dict[str, Any]:
    return _blank_none(asdict(entry))


def list_context(item: ListItem, icon_color: Optional[str] = None) -> Dict[str, Any]:
    context = _blank_none(asdict(item))
    context["icon"] = item.icon or " "
    context["icon_style"] = icon_style(icon_color)
    return context


def contact_context(item: ContactInfoItem, icon_color: Optional[str] = None) -> Dict[str, Any]:
    context = _blank_none(asdict(item))
    context["icon_style"] = icon_style(icon_color)
    return context
