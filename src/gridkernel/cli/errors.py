"""
Error display for CLI commands.
"""

import functools
import sys

from rich.console import Console

from gridkernel.exceptions import ConfigurationError, GridKernelError

console = Console(stderr=True)


def handle_cli_errors(func):
    """Decorator turning gridkernel errors into a readable message and exit code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigurationError as e:
            _print_error("Configuration error", e)
        except GridKernelError as e:
            _print_error("Error", e)

    return wrapper


def _print_error(title: str, error: GridKernelError):
    console.print(f"[red]{title}:[/red] {error.message}", markup=True, highlight=False)
    if error.help_text:
        console.print(f"[yellow]Help:[/yellow] {error.help_text}", markup=True, highlight=False)
    sys.exit(1)
