"""Command-line interfaces for shrink_it."""

from shrink_it.cli.main import main as cli_main
from shrink_it.cli.compression_cli import main as compression_main

# Define what's available when doing "from shrink_it.cli import *"
__all__ = ["cli_main", "compression_main"]
