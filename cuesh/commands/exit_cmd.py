"""
ExitCommand — Close the session
"""

from .model import Exit


COMMAND = Exit


def handle(session, command: Exit):
    """Handle exit command dispatch."""
    session.close()
