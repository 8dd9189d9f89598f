"""
Terminal delivery for resus-clock.

Components:
- cli: Typer app (doses, scenarios, causes, simulate, live)
"""

from resus.delivery.cli import app, main

__all__ = ["app", "main"]
