from typing import Dict, Optional

from jinja2 import Environment, Template, TemplateSyntaxError

from cvsheet.contexts.templating.defaults import DEFAULT_TEMPLATES
from cvsheet.contexts.templating.exceptions import TemplateRenderError


def build_environment() -> Environment:
    """
    Create the Jinja2 environment for section templates.

    Placeholders are single-brace ({title}) so templates read like plain format
    strings. Block and comment delimiters are moved out of the way since section
    templates never use them. Undefined placeholders render as "".
    """
    return Environment(
        variable_start_string="{",
        variable_end_string="}",
        block_start_string="<%%",
        block_end_string="%%>",
        comment_start_string="<#",
        comment_end_string="#>",
        trim_blocks=False,
        lstrip_blocks=False,
        keep_trailing_newline=True,
        autoescape=False,
    )


class TemplateRegistry:
    """
    Registry for compiling and caching section templates.

    Each section kind (entries, output, list, contact_info, side) has a default
    template; overrides replace the default for that kind.
    """

    def __init__(self, overrides: Optional[Dict[str, str]] = None):
        """
        Initialize the template registry.

        Args:
            overrides: Mapping of kind to template text replacing the default

        Raises:
            TemplateRenderError: If an override names an unknown kind
        """
        overrides = dict(overrides or {})
        unknown = set(overrides) - set(DEFAULT_TEMPLATES)
        if unknown:
            raise TemplateRenderError(
                f"Unknown template kind(s): {sorted(unknown)}. "
                f"Available kinds: {list(DEFAULT_TEMPLATES)}"
            )

        self.sources: Dict[str, str] = {**DEFAULT_TEMPLATES, **overrides}
        self.env = build_environment()
        self._cache: Dict[str, Template] = {}

    def compile(self, source: str, kind: Optional[str] = None) -> Template:
        """
        Compile template text.

        Raises:
            TemplateRenderError: If the text has placeholder syntax errors
        """
        try:
            return self.env.from_string(source)
        except TemplateSyntaxError as e:
            raise TemplateRenderError(
                "Could not compile template", kind=kind, template_source=source, original_error=e
            ) from e

    def get_template(self, kind: str) -> Template:
        """
        Get the template for a section kind, compiling and caching it if necessary.

        Raises:
            KeyError: If kind is unknown
            TemplateRenderError: If the template text is invalid
        """
        if kind in self._cache:
            return self._cache[kind]

        template = self.compile(self.sources[kind], kind=kind)
        self._cache[kind] = template
        return template

    def is_cached(self, kind: str) -> bool:
        return kind in self._cache

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()
