"""
Content — Static text content for session display

Separates presentation text from logic.
"""

from .help_text import HELP_TEXT, render_help

__all__ = ['HELP_TEXT', 'render_help']
