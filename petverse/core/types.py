"""Element display metadata for the six pet elements.

Each element has a hex color (rich styles, truecolor terminals), a
three-letter tag and a colorama fallback color for 8-color terminals.
The flat ``TYPE_COLORS_HEX`` / ``TYPE_ABBREVIATIONS`` maps are derived from
``ELEMENT_STYLES`` for callers that only need one attribute.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Optional
import os, re

from colorama import Fore, Style


@dataclass(frozen=True)
class ElementStyle:
    hex: str
    abbr: str
    fallback: str


ELEMENT_STYLES: Dict[str, ElementStyle] = {
    "fire": ElementStyle("#EE8130", "FIR", Fore.RED),
    "water": ElementStyle("#6390F0", "WTR", Fore.CYAN),
    "earth": ElementStyle("#B6A136", "ERT", Fore.YELLOW),
    "air": ElementStyle("#A98FF3", "AIR", Fore.WHITE),
    "light": ElementStyle("#F7D02C", "LGT", Fore.LIGHTYELLOW_EX),
    "dark": ElementStyle("#705746", "DRK", Fore.MAGENTA),
}

TYPE_COLORS_HEX: Dict[str, str] = {name: s.hex for name, s in ELEMENT_STYLES.items()}
TYPE_ABBREVIATIONS: Dict[str, str] = {name: s.abbr for name, s in ELEMENT_STYLES.items()}
ABBREVIATION_TYPES: Dict[str, str] = {s.abbr: name for name, s in ELEMENT_STYLES.items()}

RESET = Style.RESET_ALL
ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")


def _truecolor() -> bool:
    return "truecolor" in os.environ.get("COLORTERM", "").lower()


def element_style(type_name: Optional[str]) -> Optional[ElementStyle]:
    if not type_name:
        return None
    return ELEMENT_STYLES.get(type_name.lower())


def color_code(type_name: str) -> str:
    """ANSI prefix for an element, '' for unknown ones."""
    style = element_style(type_name)
    if style is None:
        return ""
    if not _truecolor():
        return style.fallback
    r, g, b = (int(style.hex[i:i + 2], 16) for i in (1, 3, 5))
    return f"\033[38;2;{r};{g};{b}m"


def colorize_type_text(type_name: str, text: str) -> str:
    code = color_code(type_name)
    return f"{code}{text}{RESET}" if code else text


def rich_type_style(type_name: str) -> str:
    """Style string usable in rich markup, empty for unknown elements."""
    style = element_style(type_name)
    return style.hex if style else ""


def type_abbreviation(type_name: str) -> str:
    style = element_style(type_name)
    return style.abbr if style else type_name[:3].upper()


def format_types(types: Iterable[str]) -> str:
    """Slash-joined colored tags, e.g. FIR/AIR for a dual-element listing."""
    return "/".join(colorize_type_text(t, type_abbreviation(t)) for t in types)


def strip_ansi(s: str) -> str:
    return ANSI_ESCAPE_RE.sub("", s)


__all__ = [
    "ElementStyle", "ELEMENT_STYLES", "TYPE_COLORS_HEX", "TYPE_ABBREVIATIONS", "ABBREVIATION_TYPES",
    "element_style", "color_code", "colorize_type_text", "rich_type_style", "type_abbreviation",
    "format_types", "strip_ansi",
]
