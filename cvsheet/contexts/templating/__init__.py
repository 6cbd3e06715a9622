"""
Templating Context

Responsibilities:
- Resolves loosely written dates into sortable years/months
- Normalizes entries (bullets, extras, timeline) and orders them newest first
- Renders sections to markdown through per-kind templates
- Holds the normalized CV tables (CVModel)

Owns: Date resolution, entry ordering, markdown fragment generation
Never: Reads from data sources directly (delegates to the intake context)
"""

from cvsheet.contexts.templating.config_resolver import RenderConfig, load_render_config
from cvsheet.contexts.templating.cv_model import CVModel
from cvsheet.contexts.templating.dates import resolve_date, resolve_month, resolve_year
from cvsheet.contexts.templating.normalizer import (
    NormalizedEntry,
    OutputEntry,
    SideEntry,
    normalize_entries,
)
from cvsheet.contexts.templating.section_renderer import render_section

__all__ = [
    # Aggregate
    "CVModel",
    # Date resolution
    "resolve_year",
    "resolve_month",
    "resolve_date",
    # Normalization
    "normalize_entries",
    "NormalizedEntry",
    "OutputEntry",
    "SideEntry",
    # Rendering
    "render_section",
    "RenderConfig",
    "load_render_config",
]
