"""Rich rendering of module load errors, keyed on the error kind."""

from typing import NamedTuple

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..errors import ErrorKind
from ..errors import ModuleLoadError


class ErrorPresentation(NamedTuple):
    title: str
    hint: str | None
    exit_code: int


_PRESENTATIONS: dict[ErrorKind, ErrorPresentation] = {
    ErrorKind.INVALID_SPECIFIER: ErrorPresentation(
        "Invalid module specifier", "Use a path, an http(s) URL, npm:<name>[@version] or jsr:<name>", 2
    ),
    ErrorKind.UNSUPPORTED_MODULE_KIND: ErrorPresentation("Unsupported module kind", None, 3),
    ErrorKind.MODULE_NOT_FOUND: ErrorPresentation("Module not found", "Check the path or URL", 4),
    ErrorKind.FILE_READ_FAILURE: ErrorPresentation("Could not read module file", "Check the file exists and is readable", 5),
    ErrorKind.PACKAGE_NOT_FOUND: ErrorPresentation("Package not found", "Check the package name and version", 6),
    ErrorKind.PACKAGE_INSTALL: ErrorPresentation("Package install failed", "Retry; partial installs are discarded", 7),
    ErrorKind.CACHE_DIR_FAILURE: ErrorPresentation("Cache directory unavailable", "Check EDON_HOME permissions", 8),
    ErrorKind.JSR_NOT_IMPLEMENTED: ErrorPresentation("JSR modules are not supported yet", "Use npm: or a CDN URL", 9),
}


def presentation_for(error: ModuleLoadError) -> ErrorPresentation:
    return _PRESENTATIONS.get(error.kind, ErrorPresentation("Module load failed", None, 1))


def display_load_error(console: Console, error: ModuleLoadError, verbose: bool = False) -> int:
    """
    Print a ModuleLoadError as a panel.

    Args:
        console: Rich console for output
        error: The error to display
        verbose: Also print the chained cause

    Returns:
        Exit code for the error kind
    """
    presentation = presentation_for(error)

    content = Text()
    if error.specifier:
        content.append("Specifier: ", style="dim")
        content.append(error.specifier, style="bold cyan")
        content.append("\n")
    content.append("Kind: ", style="dim")
    content.append(error.kind.value, style="yellow")
    content.append("\n\n")
    content.append(str(error))

    if verbose and error.__cause__ is not None:
        content.append("\n\nCause: ", style="dim")
        content.append(f"{type(error.__cause__).__name__}: {error.__cause__}")

    if presentation.hint:
        content.append("\n\n")
        content.append(presentation.hint, style="dim italic")

    console.print(Panel(content, title=f"[bold red]{presentation.title}[/bold red]", border_style="red"))
    return presentation.exit_code
