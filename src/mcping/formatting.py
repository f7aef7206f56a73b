"""Render server descriptions (MOTDs) for the terminal.

Descriptions arrive either as plain text with legacy ``§`` codes or as a
chat component (``{"text": ..., "color": ..., "extra": [...]}``).
Components are first flattened to ``§``-coded text, which can then be
stripped or turned into ANSI escape sequences.
"""

from __future__ import annotations

import re
from typing import Any

# §x§R§R§G§G§B§B (RGB) or §X (single char code)
_MC_FORMAT_PATTERN = re.compile(r"§x(?:§[0-9A-Fa-f]){6}|§.")

_ANSI_RESET = "\033[0m"
_RGB_HEX_DIGITS = 6
_HEX_COLOR_PATTERN = re.compile(r"#[0-9A-Fa-f]{6}")

# §k (obfuscated) has no terminal equivalent and is dropped.
_MC_TO_ANSI: dict[str, str] = {
    "0": "\033[30m",  # Black
    "1": "\033[34m",  # Dark Blue
    "2": "\033[32m",  # Dark Green
    "3": "\033[36m",  # Dark Aqua
    "4": "\033[31m",  # Dark Red
    "5": "\033[35m",  # Dark Purple
    "6": "\033[33m",  # Gold
    "7": "\033[37m",  # Gray
    "8": "\033[90m",  # Dark Gray
    "9": "\033[94m",  # Blue
    "a": "\033[92m",  # Green
    "b": "\033[96m",  # Aqua
    "c": "\033[91m",  # Red
    "d": "\033[95m",  # Light Purple
    "e": "\033[93m",  # Yellow
    "f": "\033[97m",  # White
    "l": "\033[1m",  # Bold
    "m": "\033[9m",  # Strikethrough
    "n": "\033[4m",  # Underline
    "o": "\033[3m",  # Italic
    "r": "\033[0m",  # Reset
}

_COLOR_NAMES: dict[str, str] = {
    "black": "0",
    "dark_blue": "1",
    "dark_green": "2",
    "dark_aqua": "3",
    "dark_red": "4",
    "dark_purple": "5",
    "gold": "6",
    "gray": "7",
    "dark_gray": "8",
    "blue": "9",
    "green": "a",
    "aqua": "b",
    "red": "c",
    "light_purple": "d",
    "yellow": "e",
    "white": "f",
}

_STYLE_FLAGS: tuple[tuple[str, str], ...] = (
    ("obfuscated", "k"),
    ("bold", "l"),
    ("strikethrough", "m"),
    ("underlined", "n"),
    ("italic", "o"),
)


def component_to_legacy(component: Any) -> str:
    """Flatten a chat component into text with ``§`` formatting codes.

    Strings pass through unchanged. Dict components contribute their
    ``color`` and style flags, their ``text``, then each of their ``extra``
    children; lists are flattened in order. ``#RRGGBB`` colors become
    ``§x`` RGB sequences.
    """
    if component is None:
        return ""
    if isinstance(component, str):
        return component
    if isinstance(component, list):
        return "".join(component_to_legacy(part) for part in component)
    if not isinstance(component, dict):
        return str(component)

    parts: list[str] = []
    color = component.get("color")
    if isinstance(color, str):
        parts.append(_color_code(color))
    for flag, code in _STYLE_FLAGS:
        if component.get(flag):
            parts.append(f"§{code}")

    parts.append(str(component.get("text", "")))
    extra = component.get("extra")
    if isinstance(extra, list):
        parts.extend(component_to_legacy(child) for child in extra)
    return "".join(parts)


def _color_code(color: str) -> str:
    if _HEX_COLOR_PATTERN.fullmatch(color):
        return "§x" + "".join(f"§{c}" for c in color[1:])
    code = _COLOR_NAMES.get(color)
    return f"§{code}" if code else ""


def strip_formatting(text: str) -> str:
    """Remove all Minecraft formatting codes from text."""
    return _MC_FORMAT_PATTERN.sub("", text)


def convert_formatting(text: str) -> str:
    """Convert Minecraft formatting codes to ANSI escape sequences.

    RGB colors become 24-bit ANSI sequences; codes with no terminal
    equivalent are removed. A reset is appended if any code was converted.
    """
    converted = False

    def _replace(match: re.Match[str]) -> str:
        nonlocal converted
        code = match.group(0)

        if code.startswith("§x"):
            hex_digits = code[2:].replace("§", "")
            if len(hex_digits) != _RGB_HEX_DIGITS:
                return ""
            r, g, b = (int(hex_digits[i : i + 2], 16) for i in (0, 2, 4))
            converted = True
            return f"\033[38;2;{r};{g};{b}m"

        ansi = _MC_TO_ANSI.get(code[1].lower())
        if ansi is None:
            return ""
        converted = True
        return ansi

    result = _MC_FORMAT_PATTERN.sub(_replace, text)
    if converted:
        result += _ANSI_RESET
    return result


def format_description(description: Any, *, color: bool = True) -> str:
    """Format a server description for terminal display.

    Args:
        description: The ``description`` value from a status document,
            either a string or a chat component.
        color: If True, convert formatting codes to ANSI sequences.
            If False, strip all formatting codes.
    """
    text = component_to_legacy(description)
    if color:
        return convert_formatting(text)
    return strip_formatting(text)
