"""Custom exceptions for templating context."""

from typing import Optional


class TemplateRenderError(Exception):
    """
    Exception raised when a section template cannot be compiled or rendered.

    Attributes:
        message: Error description
        kind: Section kind the template belongs to (e.g., 'entries', 'list')
        template_source: The template text that failed
        original_error: The original Jinja2 error
    """

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        template_source: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.kind = kind
        self.template_source = template_source
        self.original_error = original_error

        parts = [message]

        if kind:
            parts.append(f"\nKind: {kind}")

        if template_source:
            snippet = (
                template_source[:200] + "..." if len(template_source) > 200 else template_source
            )
            parts.append(f"\nTemplate:\n{snippet}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))


class InvalidRenderConfigError(ValueError):
    """Raised when a render config file has unknown keys or invalid values."""

    pass
