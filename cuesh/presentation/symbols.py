"""
Symbols — Visual vocabulary for the session

Progressive enhancement: Unicode when supported, ASCII fallback.
Configurable via display.symbols setting.

Also provides safe output utilities:
- safe_print(): Encoding-safe printing for values and file content
- colorize(): ANSI colour, gated by display.color
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Safe Output
# =============================================================================

# Common Unicode to ASCII replacements for display
UNICODE_TO_ASCII = {
    '→': '->',
    '…': '...',
    '–': '-',
    '—': '--',
    '═': '=',
    '─': '-',
    '›': '>',
    '✓': '+',
    '✗': 'x',
    '•': '*',
    '≠': '!=',
    '≤': '<=',
    '≥': '>=',
}


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Handles UnicodeEncodeError by replacing unencodable characters
    with ASCII equivalents or '?' as last resort.

    Args:
        text: Text to print (may contain any Unicode)
        end: String appended after text (default: newline)
        file: Output stream (default: sys.stdout)
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            # Last resort: replace all unencodable chars with ?
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)


# =============================================================================
# Colour
# =============================================================================

ANSI = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "blue": "\033[34m",
    "red": "\033[31m",
    "green": "\033[32m",
    "dim": "\033[2m",
}

COLOR_CHOICES = ('auto', 'always', 'never')


def color_enabled(preference: Optional[str] = None, stream=None) -> bool:
    """
    Decide whether to emit ANSI colour.

    "always" and "never" are absolute. "auto" (or None) colours only a
    terminal, and never when NO_COLOR is set.
    """
    if preference == 'always':
        return True
    if preference == 'never':
        return False
    if os.environ.get('NO_COLOR'):
        return False
    stream = stream if stream is not None else sys.stdout
    isatty = getattr(stream, 'isatty', None)
    return bool(isatty and isatty())


def colorize(text: str, code: str, enable: bool) -> str:
    """Wrap text in ANSI colour codes when enable is truthy."""
    if not enable or not text:
        return text
    return f"{ANSI.get(code, '')}{text}{ANSI['reset']}"


# =============================================================================
# Symbol Sets
# =============================================================================

@dataclass(frozen=True)
class SymbolSet:
    """Visual symbols for session output."""

    # Prompts
    prompt: str          # default prompt marker
    continuation: str    # multi-line block prompt marker

    # History listing
    rule: str            # frames the listing
    divider: str         # between entries

    # Status
    check: str


UNICODE = SymbolSet(
    prompt='›',
    continuation='…',
    rule='═' * 4,
    divider='─' * 4,
    check='✓',
)

ASCII = SymbolSet(
    prompt='>',
    continuation='...',
    rule='====',
    divider='----',
    check='+',
)


def supports_unicode() -> bool:
    """
    Check if environment likely supports Unicode output.

    Conservative: defaults to ASCII if uncertain.
    Checks stdout encoding first.
    """
    # Explicit environment override
    if os.environ.get('CUESH_ASCII_ONLY', '').lower() in ('1', 'true', 'yes'):
        return False

    stdout_encoding = getattr(sys.stdout, 'encoding', None)
    if stdout_encoding:
        encoding_lower = stdout_encoding.lower().replace('-', '').replace('_', '')
        if encoding_lower.startswith('utf'):
            return True
        # Code pages that don't carry our symbols
        if encoding_lower.startswith('cp') or encoding_lower in ('ascii', 'latin1', 'iso88591'):
            return False

    # Check locale
    lang = os.environ.get('LANG', '').lower()
    lc_all = os.environ.get('LC_ALL', '').lower()
    if 'utf-8' in lang or 'utf8' in lang:
        return True
    if 'utf-8' in lc_all or 'utf8' in lc_all:
        return True

    # Default: ASCII for safety
    return False


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)

    Returns:
        Appropriate SymbolSet for the environment
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    # Auto-detect
    return UNICODE if supports_unicode() else ASCII
