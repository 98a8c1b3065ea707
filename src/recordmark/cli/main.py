"""Main CLI entry point for the recordmark command.

Subcommands:
    render      markup file -> HTML (diagnostics reported on stderr)
    revert      HTML file -> markup
    stylesheet  print the bundled style sheet
"""

import json
import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from recordmark import __version__
from recordmark.cli.errors import CLIError, InputFileError
from recordmark.cli.models import ExitCode
from recordmark.cli.output import OutputHandler
from recordmark.config import ConfigLoader, ConfigurationError, ConverterConfig
from recordmark.converter import (
    STYLESHEET,
    STYLESHEET_VERSION,
    convert_html_to_markup,
    convert_markup_to_html,
)

app = typer.Typer(
    name="recordmark",
    help="""Convert wiki-style markup to HTML and HTML back to markup.

QUICK START:
  recordmark render notes.wiki -o notes.html       # Markup -> HTML
  recordmark render notes.wiki --metadata          # Also print metadata as JSON
  recordmark revert notes.html                     # HTML -> markup
  recordmark stylesheet > recordmark.css           # Default styles""",
    add_completion=False,
    rich_markup_mode=None,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'recordmark' namespace logger so third-party
    libraries keep their own settings.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("recordmark")
    app_logger.setLevel(level)
    # Repeated invocations in one process (tests) must not stack handlers
    app_logger.handlers.clear()

    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"recordmark_{timestamp}.log"

        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt=date_format
        )
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _read_file(file_path: str) -> str:
    try:
        return Path(file_path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise InputFileError(file_path, "file not found")
    except UnicodeDecodeError:
        raise InputFileError(file_path, "not valid UTF-8 text")
    except OSError as e:
        raise InputFileError(file_path, str(e))


def _write_output(text: str, output_path: Optional[str]) -> None:
    if output_path is None:
        typer.echo(text)
        return
    try:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        raise InputFileError(output_path, str(e))


def _load_config(config_path: Optional[str]) -> ConverterConfig:
    if config_path is None:
        return ConverterConfig()
    return ConfigLoader.load(config_path)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Convert wiki-style markup to HTML and HTML back to markup."""
    if version:
        typer.echo(f"recordmark version {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    _configure_logging(verbosity, logdir)
    ctx.obj = {"verbosity": verbosity, "no_color": no_color}


@app.command()
def render(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Markup file to convert"),
    output_path: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write HTML to this file instead of stdout",
        metavar="PATH",
    ),
    metadata: bool = typer.Option(
        False,
        "--metadata",
        help="Print metadata and diagnostics as JSON instead of HTML",
    ),
    toc: bool = typer.Option(
        False,
        "--toc",
        help="Prepend a table of contents to the HTML",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML converter configuration file",
        metavar="PATH",
    ),
) -> None:
    """Render a markup file to HTML."""
    output = OutputHandler(**ctx.obj)

    try:
        config = _load_config(config_path)
        if toc:
            config = replace(config, table_of_contents=True)

        source = _read_file(file)
        output.debug(f"Read {len(source)} characters from {file}")

        result = convert_markup_to_html(source, config)
        output.print_diagnostics(file, result.errors)

        if metadata:
            document = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
        elif result.toc:
            document = f"{result.toc}\n{result.html}"
        else:
            document = result.html
        _write_output(document, output_path)

        if output_path:
            output.success(f"Rendered {file} -> {output_path}")
        output.info(
            f"  {len(result.metadata.headings)} heading(s), {len(result.metadata.links)} link(s), "
            f"{len(result.metadata.footnotes)} footnote(s), {len(result.warnings)} warning(s)"
        )

        if result.has_errors:
            raise typer.Exit(ExitCode.CONVERSION_ERRORS)
        raise typer.Exit(ExitCode.SUCCESS)

    except (CLIError, ConfigurationError) as e:
        logger.error(f"Render failed: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    except typer.Exit:
        raise

    except Exception as e:
        logger.exception("Unexpected error during render")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


@app.command()
def revert(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="HTML file to convert back to markup"),
    output_path: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write markup to this file instead of stdout",
        metavar="PATH",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML converter configuration file",
        metavar="PATH",
    ),
) -> None:
    """Convert an HTML file back to markup."""
    output = OutputHandler(**ctx.obj)

    try:
        config = _load_config(config_path)
        html = _read_file(file)
        markup = convert_html_to_markup(html, config)
        _write_output(markup, output_path)

        if output_path:
            output.success(f"Reverted {file} -> {output_path}")
        raise typer.Exit(ExitCode.SUCCESS)

    except (CLIError, ConfigurationError) as e:
        logger.error(f"Revert failed: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    except typer.Exit:
        raise

    except Exception as e:
        logger.exception("Unexpected error during revert")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


@app.command()
def stylesheet() -> None:
    """Print the default style sheet."""
    typer.echo(f"/* recordmark stylesheet {STYLESHEET_VERSION} */")
    typer.echo(STYLESHEET)


def main() -> None:
    """Main entry point for the console script."""
    app()


if __name__ == "__main__":
    main()
