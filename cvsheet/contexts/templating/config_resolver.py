"""
Render Configuration

Loads the optional YAML render config that customizes how a CV is rendered:

    icon_color: "#53DD6C"          # inline colour for font-awesome icons
    templates:                      # per-kind template overrides
      contact_info: "- <i class='fa fa-{icon}'></i> **{contact}**"
    layout:                         # sections rendered by `render_cv.py build`
      - {kind: contact_info, heading: "## Contact"}
      - {kind: text_block, label: intro}
      - {kind: section, section: industry_positions, heading: "## Experience"}
      - {kind: links, heading: "## Links"}

Every key is optional.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from omegaconf import OmegaConf

from cvsheet.contexts.templating.defaults import TEMPLATE_KINDS
from cvsheet.contexts.templating.exceptions import InvalidRenderConfigError

CONFIG_KEYS = {"icon_color", "templates", "layout"}

# Layout kind -> required argument (None if the kind takes no argument)
LAYOUT_KINDS = {
    "section": "section",
    "output": "section",
    "list": "section",
    "side": "section",
    "text_block": "label",
    "contact_info": None,
    "links": None,
}


@dataclass
class RenderConfig:
    """Resolved render configuration."""

    icon_color: Optional[str] = None
    templates: Dict[str, str] = field(default_factory=dict)
    layout: List[Dict[str, Any]] = field(default_factory=list)


def validate_layout(layout: List[Dict[str, Any]]) -> None:
    """
    Check each layout step names a known kind and carries its required argument.

    Raises:
        InvalidRenderConfigError: On the first invalid step
    """
    for i, step in enumerate(layout):
        kind = step.get("kind")
        if kind not in LAYOUT_KINDS:
            raise InvalidRenderConfigError(
                f"Layout step {i}: unknown kind '{kind}'. Available kinds: {list(LAYOUT_KINDS)}"
            )
        required = LAYOUT_KINDS[kind]
        if required and not step.get(required):
            raise InvalidRenderConfigError(f"Layout step {i}: kind '{kind}' requires '{required}'")


def load_render_config(config_path: Optional[Path] = None) -> RenderConfig:
    """
    Load a render config YAML file.

    Args:
        config_path: Path to the YAML file (None returns the defaults)

    Returns:
        RenderConfig with overrides applied

    Raises:
        FileNotFoundError: If config_path does not exist
        InvalidRenderConfigError: If the file has unknown keys, unknown template
            kinds or invalid layout steps
    """
    if config_path is None:
        return RenderConfig()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Render config not found: {config_path}")

    data = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True) or {}

    unknown = set(data) - CONFIG_KEYS
    if unknown:
        raise InvalidRenderConfigError(
            f"Unknown render config key(s): {sorted(unknown)}. Expected: {sorted(CONFIG_KEYS)}"
        )

    templates = data.get("templates") or {}
    unknown_kinds = set(templates) - set(TEMPLATE_KINDS)
    if unknown_kinds:
        raise InvalidRenderConfigError(
            f"Unknown template kind(s): {sorted(unknown_kinds)}. Available kinds: {list(TEMPLATE_KINDS)}"
        )

    layout = data.get("layout") or []
    validate_layout(layout)

    return RenderConfig(
        icon_color=data.get("icon_color"),
        templates={kind: str(text) for kind, text in templates.items()},
        layout=layout,
    )
