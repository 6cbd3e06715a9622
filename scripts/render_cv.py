#!/usr/bin/env python3
"""
CV Rendering CLI

Renders sections of a spreadsheet-driven CV to markdown on stdout (or a file).

Commands:
    section    - Render one entries section
    output     - Render one output section
    text-block - Render a text block by label
    contact    - Render contact info
    list       - Render one list section
    side       - Render one side section
    build      - Render every step of the config's layout

Examples:\n

    render_cv.py section industry_positions --data data/          # CSV folder

    render_cv.py text-block intro --data https://docs.google.com/spreadsheets/d/<id>

    render_cv.py build --config cv_config.yaml --pdf-mode -o cv_body.md
"""

import os
from pathlib import Path
from typing import Callable, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from cvsheet.contexts.intake import SourceUnavailableError
from cvsheet.contexts.templating import CVModel, load_render_config
from cvsheet.contexts.templating.exceptions import InvalidRenderConfigError, TemplateRenderError
from cvsheet.contexts.templating.logger import setup_templating_logger
from cvsheet.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
DEFAULT_DATA_LOCATION = os.getenv("CV_DATA_LOCATION")
DEFAULT_RENDER_CONFIG = os.getenv("CV_RENDER_CONFIG")
DEFAULT_PDF_MODE = os.getenv("CV_PDF_MODE", "false").lower() in ("1", "true", "yes")
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")


app = typer.Typer(
    help="Render spreadsheet-driven CV sections to markdown",
    add_completion=False,
    invoke_without_command=True,
)

DataOption = Annotated[
    Optional[str],
    typer.Option("--data", "-d", help="Google Sheet URL or folder of CSV files (env: CV_DATA_LOCATION)"),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Render config YAML (env: CV_RENDER_CONFIG)"),
]
PdfModeOption = Annotated[
    bool,
    typer.Option("--pdf-mode/--html-mode", help="Strip links into numbered footnotes for PDF output"),
]
PrivateOption = Annotated[
    bool,
    typer.Option("--private", help="Sheet is not publicly readable; use cached credentials"),
]
OutputOption = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Write markdown to this file instead of stdout"),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def load_model(
    data: Optional[str], config_path: Optional[Path], pdf_mode: bool, private: bool
) -> CVModel:
    """Set up logging and build the model, exiting with code 1 on failure."""
    location = data or DEFAULT_DATA_LOCATION
    if not location:
        typer.secho(
            "Error: no data location (use --data or set CV_DATA_LOCATION)\n",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    setup_templating_logger(LOGS_PATH / f"render_{now()}", pdf_mode=pdf_mode)

    config_path = config_path or (Path(DEFAULT_RENDER_CONFIG) if DEFAULT_RENDER_CONFIG else None)
    try:
        config = load_render_config(config_path)
        return CVModel.from_location(
            location,
            pdf_mode=pdf_mode,
            publicly_readable=not private,
            api_key=GOOGLE_API_KEY,
            config=config,
        )
    except (SourceUnavailableError, InvalidRenderConfigError, TemplateRenderError, FileNotFoundError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def emit(markdown: str, output: Optional[Path]) -> None:
    """Write rendered markdown to a file or stdout."""
    if output is None:
        typer.echo(markdown, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(markdown, encoding="utf-8")
    typer.secho(f"✓ Wrote {output}", fg=typer.colors.GREEN, err=True)


def _run(
    render: Callable[[CVModel], str],
    data: Optional[str],
    config: Optional[Path],
    pdf_mode: bool,
    private: bool,
    output: Optional[Path],
) -> None:
    cv = load_model(data, config, pdf_mode, private)
    markdown = render(cv)
    if pdf_mode and cv.links:
        markdown += "\n" + cv.render_links()
    emit(markdown, output)


@app.command("section")
def section_command(
    section_id: Annotated[str, typer.Argument(help="Value of the entries 'section' column")],
    data: DataOption = None,
    config: ConfigOption = None,
    pdf_mode: PdfModeOption = DEFAULT_PDF_MODE,
    private: PrivateOption = False,
    output: OutputOption = None,
):
    """Render one entries section (newest first)."""
    _run(lambda cv: cv.render_section(section_id), data, config, pdf_mode, private, output)


@app.command("output")
def output_command(
    section_id: Annotated[str, typer.Argument(help="Value of the output 'section' column")],
    data: DataOption = None,
    config: ConfigOption = None,
    pdf_mode: PdfModeOption = DEFAULT_PDF_MODE,
    private: PrivateOption = False,
    output: OutputOption = None,
):
    """Render one output section (newest year first)."""
    _run(lambda cv: cv.render_output_section(section_id), data, config, pdf_mode, private, output)


@app.command("text-block")
def text_block_command(
    label: Annotated[str, typer.Argument(help="Text block label")],
    data: DataOption = None,
    config: ConfigOption = None,
    pdf_mode: PdfModeOption = DEFAULT_PDF_MODE,
    private: PrivateOption = False,
    output: OutputOption = None,
):
    """Render a text block."""
    _run(lambda cv: cv.render_text_block(label), data, config, pdf_mode, private, output)


@app.command("contact")
def contact_command(
    data: DataOption = None,
    config: ConfigOption = None,
    pdf_mode: PdfModeOption = DEFAULT_PDF_MODE,
    private: PrivateOption = False,
    output: OutputOption = None,
):
    """Render contact info."""
    _run(lambda cv: cv.render_contact_info(), data, config, pdf_mode, private, output)


@app.command("list")
def list_command(
    section_id: Annotated[str, typer.Argument(help="Value of the list 'section' column")],
    data: DataOption = None,
    config: ConfigOption = None,
    pdf_mode: PdfModeOption = DEFAULT_PDF_MODE,
    private: PrivateOption = False,
    output: OutputOption = None,
):
    """Render one list section."""
    _run(lambda cv: cv.render_list(section_id), data, config, pdf_mode, private, output)


@app.command("side")
def side_command(
    section_id: Annotated[str, typer.Argument(help="Value of the side 'section' column")],
    data: DataOption = None,
    config: ConfigOption = None,
    pdf_mode: PdfModeOption = DEFAULT_PDF_MODE,
    private: PrivateOption = False,
    output: OutputOption = None,
):
    """Render one side section."""
    _run(lambda cv: cv.render_side_section(section_id), data, config, pdf_mode, private, output)


@app.command("build")
def build_command(
    data: DataOption = None,
    config: ConfigOption = None,
    pdf_mode: PdfModeOption = DEFAULT_PDF_MODE,
    private: PrivateOption = False,
    output: OutputOption = None,
):
    """
    Render every step of the render config's layout into one markdown body.

    Examples:\n

        $ render_cv.py build --config cv_config.yaml -o out/cv_body.md

        $ render_cv.py build --config cv_config.yaml --pdf-mode
    """
    config_path = config or (Path(DEFAULT_RENDER_CONFIG) if DEFAULT_RENDER_CONFIG else None)
    if config_path is None:
        typer.secho(
            "Error: build needs a render config with a layout (use --config)\n",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    cv = load_model(data, config_path, pdf_mode, private)
    layout = load_render_config(config_path).layout
    if not layout:
        typer.secho(f"Error: {config_path} has no layout\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    emit(cv.render_layout(layout), output)


if __name__ == "__main__":
    app()
