"""
Presentation — Display layer for the session

Contains display and formatting:
- Symbols: Visual vocabulary (unicode/ascii), safe printing, colour
- Formatters: Values, history listings, error lines
"""

from .symbols import (
    SymbolSet, get_symbols, safe_print,
    colorize, color_enabled,
    UNICODE, ASCII,
)
from .formatters import format_value, format_history, format_error

__all__ = [
    # Symbols
    "SymbolSet", "get_symbols", "safe_print",
    "colorize", "color_enabled",
    "UNICODE", "ASCII",
    # Formatters
    "format_value", "format_history", "format_error",
]
