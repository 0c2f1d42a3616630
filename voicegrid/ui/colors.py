#!/usr/bin/env python3
"""Color utilities for UI rendering."""

Color = tuple[int, int, int]


def parse_color(value) -> Color:
    """Convert a config color ([r, g, b] or "#RRGGBB") to an RGB tuple.

    Example:
        >>> parse_color("#2C405B")
        (44, 64, 91)
        >>> parse_color([255, 20, 147])
        (255, 20, 147)
    """
    if isinstance(value, str):
        hex_value = value.lstrip("#")
        if len(hex_value) != 6:
            raise ValueError(f"Invalid hex color: {value}")
        return tuple(int(hex_value[i : i + 2], 16) for i in (0, 2, 4))
    r, g, b = value
    return (int(r), int(g), int(b))


def dim_color(color: Color, factor: float = 0.5) -> Color:
    """Dim a color by a given factor.

    Args:
        color: RGB color tuple (r, g, b)
        factor: Dimming factor (0.0 = black, 1.0 = original)

    Returns:
        Dimmed RGB color tuple

    Example:
        >>> dim_color((255, 255, 255), 0.5)
        (127, 127, 127)
    """
    return tuple(int(c * factor) for c in color)


def palette_from_config(config: dict) -> dict[str, Color]:
    """Parse every entry of the ``colors`` config section."""
    return {name: parse_color(value) for name, value in config.get("colors", {}).items()}


__all__ = ["Color", "parse_color", "dim_color", "palette_from_config"]
