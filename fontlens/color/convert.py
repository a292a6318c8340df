"""
Color space conversion: sampled sRGB triple → hex, LCH and HCL.

The Lab step follows the textbook CIE formulation with the D65 white point:

    XYZ = M · (r, g, b) / 255           M = sRGB→XYZ (D65)
    f(t) = t^(1/3)          if t > 0.008856
         = 7.787·t + 16/116 otherwise
    L = 116·f(Y/Yr) − 16
    a = 500·(f(X/Xr) − f(Y/Yr))
    b = 200·(f(Y/Yr) − f(Z/Zr))
    C = √(a² + b²),  H = atan2(b, a) in degrees, normalized to [0, 360)

Channels are used as sampled (no gamma linearization), matching the values
users compare against in browser devtools.
"""

from __future__ import annotations

import math
import re

from fontlens.core.types import HCL, LCH, RGB, ColorSnapshot

# D65 reference white
_XR = 0.95047
_YR = 1.0
_ZR = 1.08883

_EPSILON = 0.008856
_KAPPA_SLOPE = 7.787
_KAPPA_OFFSET = 16 / 116

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp_channel(value: float) -> int:
    return max(0, min(255, _round_half_up(value)))


def _lab_f(t: float) -> float:
    if t > _EPSILON:
        return t ** (1 / 3)
    return _KAPPA_SLOPE * t + _KAPPA_OFFSET


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Return ``#rrggbb``; channels are clamped to integers in [0, 255]."""
    r, g, b = _clamp_channel(r), _clamp_channel(g), _clamp_channel(b)
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(value: str) -> RGB:
    """Inverse of rgb_to_hex. Accepts ``#rrggbb``, ``rrggbb`` or ``#rgb``."""
    match = _HEX_RE.match(value.strip())
    if match is None:
        raise ValueError(f"Not a hex color: {value!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return RGB(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_to_lch(r: float, g: float, b: float) -> LCH:
    rn, gn, bn = _clamp_channel(r) / 255, _clamp_channel(g) / 255, _clamp_channel(b) / 255

    x = (rn * 0.4124 + gn * 0.3576 + bn * 0.1805) / _XR
    y = (rn * 0.2126 + gn * 0.7152 + bn * 0.0722) / _YR
    z = (rn * 0.0193 + gn * 0.1192 + bn * 0.9505) / _ZR

    fx, fy, fz = _lab_f(x), _lab_f(y), _lab_f(z)
    lightness = 116 * fy - 16
    a = 500 * (fx - fy)
    b_star = 200 * (fy - fz)

    chroma = math.sqrt(a * a + b_star * b_star)
    c = _round_half_up(chroma)
    if c == 0:
        # Hue is undefined for achromatic colors; float noise would otherwise
        # report e.g. 295° for pure white.
        h = 0
    else:
        hue = math.degrees(math.atan2(b_star, a))
        if hue < 0:
            hue += 360
        h = _round_half_up(hue) % 360

    return LCH(l=_round_half_up(lightness), c=c, h=h)


def rgb_to_hcl(r: float, g: float, b: float) -> HCL:
    """Same numbers as rgb_to_lch, fields in hue/chroma/lightness order."""
    lch = rgb_to_lch(r, g, b)
    return HCL(h=lch.h, c=lch.c, l=lch.l)


def color_snapshot(r: float, g: float, b: float) -> ColorSnapshot:
    rgb = RGB(_clamp_channel(r), _clamp_channel(g), _clamp_channel(b))
    return ColorSnapshot(
        rgb=rgb,
        hex=rgb_to_hex(*rgb.as_tuple()),
        lch=rgb_to_lch(*rgb.as_tuple()),
        hcl=rgb_to_hcl(*rgb.as_tuple()),
    )
