"""Translate style tags into Qt character formats."""
from __future__ import annotations

from typing import Any, Mapping

from PySide6.QtGui import QColor, QFont, QTextCharFormat

# QFont::Bold
BOLD_WEIGHT = 700


def char_format_for(style: Mapping[str, Any]) -> QTextCharFormat:
    """Build a ``QTextCharFormat`` that sets exactly the attributes in ``style``.

    The format is meant for ``mergeCharFormat`` so properties the style does
    not mention are left alone.
    """

    fmt = QTextCharFormat()
    if "foreground" in style:
        fmt.setForeground(QColor(style["foreground"]))
    if "background" in style:
        fmt.setBackground(QColor(style["background"]))
    if "bold" in style:
        fmt.setFontWeight(QFont.Weight.Bold if style["bold"] else QFont.Weight.Normal)
    if "italic" in style:
        fmt.setFontItalic(bool(style["italic"]))
    if "underline" in style:
        fmt.setFontUnderline(bool(style["underline"]))
    if "font_family" in style:
        fmt.setFontFamilies([str(style["font_family"])])
    if "font_size" in style:
        fmt.setFontPointSize(float(style["font_size"]))
    return fmt


def style_matches(fmt: QTextCharFormat, style: Mapping[str, Any]) -> bool:
    """Return True if ``fmt`` carries every attribute value in ``style``."""

    if "foreground" in style and fmt.foreground().color() != QColor(style["foreground"]):
        return False
    if "background" in style and fmt.background().color() != QColor(style["background"]):
        return False
    if "bold" in style and (fmt.fontWeight() >= BOLD_WEIGHT) != bool(style["bold"]):
        return False
    if "italic" in style and fmt.fontItalic() != bool(style["italic"]):
        return False
    if "underline" in style and fmt.fontUnderline() != bool(style["underline"]):
        return False
    return True
