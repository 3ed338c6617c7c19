"""
Nearest Material Design color lookup.

- parse(color): hex with or without "#" (3 or 6 digits), or anything rich's color
  parser understands ("rgb(10,20,30)", named colors). Returns a ColorTriplet.
- palette(): every Material color, in palette order.
- closest(color): palette entry with the smallest Euclidean RGB distance; the first
  entry wins ties.

Quick example:
    >>> closest("#f44337").name
    'Red 500'
"""
import colorsys
import functools
import math
import re
from typing import NamedTuple

from rich.color import Color, ColorParseError

from .palette import MATERIAL


class Material(NamedTuple):
    name: str
    r: int
    g: int
    b: int
    h: int
    s: int
    l: int
    hex: str
    rgb: str
    hsl: str


def parse(color, /):
    """
    Parse a color string into a rich ColorTriplet.

    Raises
    - TypeError: color is not a string.
    - ValueError: color is not recognized.
    """
    if not isinstance(color, str):
        raise TypeError("parse() argument must be a string")
    text = color.strip()
    if re.fullmatch(r"[0-9a-fA-F]{3}([0-9a-fA-F]{3})?", text):
        text = "#" + text
    if re.fullmatch(r"#[0-9a-fA-F]{3}", text):
        text = "#" + "".join(char * 2 for char in text[1:])
    try:
        return Color.parse(text).get_truecolor()
    except ColorParseError:
        raise ValueError(f"unrecognized color: {color!r}") from None


def _capitalize(text):
    return re.sub(r"\b[a-z]", lambda match: match[0].upper(), text)


def _material(group, shade, hex):
    triplet = parse(hex)
    hue, lightness, saturation = colorsys.rgb_to_hls(*triplet.normalized)
    h, s, l = round(hue * 360) % 360, round(saturation * 100), round(lightness * 100)
    name = _capitalize(re.sub(r"[A-Z]", lambda match: " " + match[0].lower(), group))
    return Material(
        name=name + (" " + _capitalize(shade) if shade else ""),
        r=triplet.red,
        g=triplet.green,
        b=triplet.blue,
        h=h,
        s=s,
        l=l,
        hex=triplet.hex,
        rgb=triplet.rgb.replace(" ", ""),
        hsl=f"hsl({h},{s}%,{l}%)",
    )


@functools.cache
def palette():
    colors = []
    for group, shades in MATERIAL.items():
        if isinstance(shades, str):
            colors.append(_material(group, None, shades))
            continue
        for shade, hex in shades.items():
            colors.append(_material(group, shade, hex))
    return tuple(colors)


def closest(color, /):
    """Return the Material entry nearest to the given color."""
    target = tuple(parse(color))
    return min(palette(), key=lambda material: math.dist((material.r, material.g, material.b), target))


__all__ = (
    "Material",
    "parse",
    "palette",
    "closest",
)
