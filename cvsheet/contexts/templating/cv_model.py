"""
CV Model

Aggregate holding every normalized CV table and exposing one render call per
section kind. Construction reads all six tables from the data source and
normalizes them once; after that the tables are never modified.

Each kind has a render_* method returning markdown and a print_* method writing
it to the model's output stream and returning the model, so a document template
can chain calls:

    cv = CVModel.from_location("data/", pdf_mode=True)
    cv.print_text_block("intro").print_section("industry_positions")
"""

import sys
import time
from functools import partial
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, TextIO

from cvsheet.contexts.intake.records import (
    ContactInfoItem,
    ListItem,
    RawEntry,
    RawOutputRow,
    RawSideRow,
    TextBlock,
    records_from_rows,
)
from cvsheet.contexts.intake.sources import DataSource, open_source
from cvsheet.contexts.templating.config_resolver import RenderConfig, validate_layout
from cvsheet.contexts.templating.defaults import (
    DEFAULT_SEPARATORS,
    contact_context,
    entry_context,
    list_context,
    output_context,
    side_context,
)
from cvsheet.contexts.templating.logger import (
    _log_debug,
    log_model_loaded,
    log_model_start,
    log_section_rendered,
)
from cvsheet.contexts.templating.normalizer import (
    normalize_entries,
    normalize_output_rows,
    normalize_side_rows,
    order_output_entries,
)
from cvsheet.contexts.templating.section_renderer import in_section, render_rows
from cvsheet.contexts.templating.template_registry import TemplateRegistry
from cvsheet.utils.markdown import format_links_markdown, sanitize_links


class CVModel:
    """
    Normalized CV tables plus render entry points.

    Attributes:
        pdf_mode: Replace markdown links with numbered superscripts (links are
            listed by render_links())
        entries_data: Normalized entries, newest first
        text_blocks: Text blocks in sheet order
        contact_info: Contact lines in sheet order
        list: List items in sheet order
        output: Output rows in sheet order
        side: Side rows in sheet order
        links: URLs stripped from rendered fragments in pdf_mode, in footnote order.
            Each URL is numbered once, so re-rendering a fragment is stable.
    """

    def __init__(
        self,
        source: DataSource,
        pdf_mode: bool = False,
        templates: Optional[Dict[str, str]] = None,
        icon_color: Optional[str] = None,
        out: Optional[TextIO] = None,
    ):
        """
        Load and normalize all CV tables from a data source.

        Args:
            source: Data source serving the six CV tables
            pdf_mode: Whether the output is headed for PDF (links get stripped)
            templates: Per-kind template overrides (kinds: entries, output, list,
                contact_info, side)
            icon_color: Inline colour for list and contact icons (default: none)
            out: Stream print_* methods write to (default: sys.stdout)

        Raises:
            SourceUnavailableError: If any table cannot be read
            TemplateRenderError: If a template override is invalid
        """
        start_time = time.time()
        log_model_start(source.location, pdf_mode)

        self.source_location = source.location
        self.pdf_mode = pdf_mode
        self.icon_color = icon_color
        self.out = out
        self.templates = TemplateRegistry(templates)
        self.links: List[str] = []

        tables = source.read_tables()

        self.entries_data = normalize_entries(records_from_rows(RawEntry, tables["entries"]))
        self.text_blocks = records_from_rows(TextBlock, tables["text_blocks"])
        self.contact_info = records_from_rows(ContactInfoItem, tables["contact_info"])
        self.list = records_from_rows(ListItem, tables["list"])
        self.output = normalize_output_rows(records_from_rows(RawOutputRow, tables["output"]))
        self.side = normalize_side_rows(records_from_rows(RawSideRow, tables["side"]))

        log_model_loaded(
            {
                "entries": len(self.entries_data),
                "text_blocks": len(self.text_blocks),
                "contact_info": len(self.contact_info),
                "list": len(self.list),
                "output": len(self.output),
                "side": len(self.side),
            },
            time.time() - start_time,
        )

    @classmethod
    def from_location(
        cls,
        location: str,
        pdf_mode: bool = False,
        publicly_readable: bool = True,
        credentials_cache: Path = Path(".secrets"),
        api_key: Optional[str] = None,
        config: Optional[RenderConfig] = None,
        out: Optional[TextIO] = None,
    ) -> "CVModel":
        """
        Build a model from a Google Sheet URL or a folder of CSV files.

        Args:
            location: Sheet URL or folder path
            pdf_mode: Whether the output is headed for PDF
            publicly_readable: For sheets, read with the API key instead of cached credentials
            credentials_cache: For private sheets, folder holding the cached token
            api_key: For public sheets, the Google API key
            config: Render config supplying template overrides and icon colour
            out: Stream print_* methods write to
        """
        config = config or RenderConfig()
        source = open_source(
            location,
            publicly_readable=publicly_readable,
            credentials_cache=credentials_cache,
            api_key=api_key,
        )
        return cls(
            source,
            pdf_mode=pdf_mode,
            templates=config.templates,
            icon_color=config.icon_color,
            out=out,
        )

    # =========================================================================
    # RENDERING
    # =========================================================================

    def _template(self, kind: str, template: Optional[str]):
        if template is None:
            return self.templates.get_template(kind)
        return self.templates.compile(template, kind=kind)

    def _finish(self, fragment: str) -> str:
        """Strip links in pdf_mode, collecting them for render_links()."""
        if not self.pdf_mode:
            return fragment
        fragment, self.links = sanitize_links(fragment, self.links)
        return fragment

    def _render(
        self,
        kind: str,
        rows: Iterable[Any],
        template: Optional[str],
        context,
        section_id: str = "",
    ) -> str:
        rows = list(rows)
        fragment = render_rows(
            rows, self._template(kind, template), context, DEFAULT_SEPARATORS[kind]
        )
        log_section_rendered(kind, section_id, len(rows))
        return fragment

    def render_section(self, section_id: str, template: Optional[str] = None) -> str:
        """
        Render the entries of one section, newest first.

        Args:
            section_id: Value of the entries table's section column
            template: Template text overriding the configured entries template

        Returns:
            Markdown fragment ("" when no entry matches)
        """
        rows = in_section(self.entries_data, section_id)
        return self._finish(self._render("entries", rows, template, entry_context, section_id))

    def render_output_section(self, section_id: str, template: Optional[str] = None) -> str:
        """Render the output rows of one section, newest year first."""
        rows = order_output_entries(in_section(self.output, section_id))
        return self._finish(self._render("output", rows, template, output_context, section_id))

    def render_text_block(self, label: str) -> str:
        """
        Render the text block(s) whose label matches exactly.

        Multiple matches are joined with a space; no match renders as "".
        """
        texts = [block.text for block in self.text_blocks if block.label == label and block.text]
        if not texts:
            _log_debug(f"No text block labelled '{label}'")
        return self._finish(" ".join(texts))

    def render_contact_info(self, template: Optional[str] = None) -> str:
        """Render every contact line."""
        context = partial(contact_context, icon_color=self.icon_color)
        return self._finish(self._render("contact_info", self.contact_info, template, context))

    def render_list(self, section_id: str, template: Optional[str] = None) -> str:
        """Render the list items of one section."""
        rows = in_section(self.list, section_id)
        context = partial(list_context, icon_color=self.icon_color)
        return self._finish(self._render("list", rows, template, context, section_id))

    def render_side_section(self, section_id: str, template: Optional[str] = None) -> str:
        """Render the side rows of one section."""
        rows = in_section(self.side, section_id)
        return self._finish(self._render("side", rows, template, side_context, section_id))

    def render_links(self) -> str:
        """Numbered list of links stripped so far in pdf_mode ("" otherwise)."""
        return format_links_markdown(self.links)

    def render_layout(self, layout: List[Dict[str, Any]]) -> str:
        """
        Render a sequence of layout steps into one document body.

        Each step is a dict with a "kind" (section, output, list, side, text_block,
        contact_info, links), the argument that kind needs ("section" or "label"),
        and an optional "heading" written before the fragment.

        Raises:
            InvalidRenderConfigError: If a step has an unknown kind or lacks its argument
        """
        validate_layout(layout)

        renderers = {
            "section": lambda step: self.render_section(step["section"]),
            "output": lambda step: self.render_output_section(step["section"]),
            "list": lambda step: self.render_list(step["section"]),
            "side": lambda step: self.render_side_section(step["section"]),
            "text_block": lambda step: self.render_text_block(step["label"]),
            "contact_info": lambda step: self.render_contact_info(),
            "links": lambda step: self.render_links(),
        }

        parts = []
        for step in layout:
            if step.get("heading"):
                parts.append(f"{step['heading']}\n\n")
            parts.append(renderers[step["kind"]](step))
            parts.append("\n")
        return "".join(parts)

    # =========================================================================
    # PRINTING (chainable)
    # =========================================================================

    def _write(self, fragment: str) -> "CVModel":
        stream = self.out if self.out is not None else sys.stdout
        stream.write(fragment)
        if fragment and not fragment.endswith("\n"):
            stream.write("\n")
        return self

    def print_section(self, section_id: str, template: Optional[str] = None) -> "CVModel":
        return self._write(self.render_section(section_id, template))

    def print_output_section(self, section_id: str, template: Optional[str] = None) -> "CVModel":
        return self._write(self.render_output_section(section_id, template))

    def print_text_block(self, label: str) -> "CVModel":
        return self._write(self.render_text_block(label))

    def print_contact_info(self, template: Optional[str] = None) -> "CVModel":
        return self._write(self.render_contact_info(template))

    def print_list(self, section_id: str, template: Optional[str] = None) -> "CVModel":
        return self._write(self.render_list(section_id, template))

    def print_side_section(self, section_id: str, template: Optional[str] = None) -> "CVModel":
        return self._write(self.render_side_section(section_id, template))

    def print_links(self) -> "CVModel":
        return self._write(self.render_links())
