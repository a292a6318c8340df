"""TooltipFormatter — converts TooltipContent into labelled rows and text."""

from __future__ import annotations

from dataclasses import dataclass

from fontlens.core.types import ColorSnapshot, TooltipContent

_WEIGHT_NAMES = {
    "100": "Thin",
    "200": "Extra Light",
    "300": "Light",
    "400": "Regular",
    "500": "Medium",
    "600": "Semi Bold",
    "700": "Bold",
    "800": "Extra Bold",
    "900": "Black",
}

_NO_FONT = "No font information available"


@dataclass(frozen=True)
class TooltipRow:
    key: str  # stable field id used for copy / link activation
    label: str
    value: str
    copy_value: str
    is_link: bool = False
    swatch: str | None = None  # hex color shown next to color rows


def format_font_weight(weight: str) -> str:
    """``"700"`` → ``"700 (Bold)"``; unknown weights are shown as-is."""
    name = _WEIGHT_NAMES.get(str(weight))
    return f"{weight} ({name})" if name else str(weight)


def format_lch(color: ColorSnapshot) -> str:
    return f"L: {color.lch.l}, C: {color.lch.c}, H: {color.lch.h}"


def format_hcl(color: ColorSnapshot) -> str:
    return f"H: {color.hcl.h}, C: {color.hcl.c}, L: {color.hcl.l}"


class TooltipFormatter:
    """
    Produces the rows a tooltip shows.

    Typography rows come first (family is the search link), then the three
    color encodings. Empty style values are skipped.
    """

    def rows(self, content: TooltipContent | None) -> list[TooltipRow]:
        rows: list[TooltipRow] = []
        style = content.style if content else None
        color = content.color if content else None

        if style is None:
            rows.append(TooltipRow(key="no_font", label=_NO_FONT, value="", copy_value=""))
        else:
            fields = [
                ("font_family", "Font Family", style.font_family, style.font_family),
                ("font_weight", "Font Weight", format_font_weight(style.font_weight), style.font_weight),
                ("font_size", "Font Size", style.font_size, style.font_size),
                ("line_height", "Line Height", style.line_height, style.line_height),
                ("letter_spacing", "Letter Spacing", style.letter_spacing, style.letter_spacing),
                ("text_align", "Text Align", style.text_align, style.text_align),
            ]
            for key, label, value, copy_value in fields:
                if value:
                    rows.append(TooltipRow(
                        key=key, label=label, value=value, copy_value=copy_value,
                        is_link=key == "font_family",
                    ))

        if color is not None:
            lch, hcl = format_lch(color), format_hcl(color)
            rows += [
                TooltipRow(key="hex", label="HEX", value=color.hex, copy_value=color.hex, swatch=color.hex),
                TooltipRow(key="lch", label="LCH", value=lch, copy_value=lch, swatch=color.hex),
                TooltipRow(key="hcl", label="HCL", value=hcl, copy_value=hcl, swatch=color.hex),
            ]
        return rows

    def row(self, content: TooltipContent | None, key: str) -> TooltipRow | None:
        return next((r for r in self.rows(content) if r.key == key), None)

    def render_text(self, content: TooltipContent | None) -> str:
        lines = []
        for row in self.rows(content):
            lines.append(f"{row.label}: {row.value}" if row.value else row.label)
        return "\n".join(lines)
