"""CLI for har-extract.

This module provides a Typer-based CLI for extracting response bodies
from HAR files.

Requires the 'cli' optional dependency: pip install har-extract[cli]
"""

from __future__ import annotations
