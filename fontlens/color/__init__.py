from fontlens.color.convert import (
    color_snapshot,
    hex_to_rgb,
    rgb_to_hcl,
    rgb_to_hex,
    rgb_to_lch,
)

__all__ = ["color_snapshot", "hex_to_rgb", "rgb_to_hcl", "rgb_to_hex", "rgb_to_lch"]
