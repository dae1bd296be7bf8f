def srgb_to_xy(r: int, g: int, b: int) -> tuple[float, float]:
    """Convert an 8 bit sRGB colour to CIE xy chromaticity (Wide RGB D65)."""
    def lin(u):
        u = max(0, min(u, 255)) / 255
        return pow((u + 0.055) / 1.055, 2.4) if u > 0.04045 else u / 12.92

    red, green, blue = lin(r), lin(g), lin(b)
    X = red * 0.4124 + green * 0.3576 + blue * 0.1805
    Y = red * 0.2126 + green * 0.7152 + blue * 0.0722
    Z = red * 0.0193 + green * 0.1192 + blue * 0.9505

    total = X + Y + Z
    if total == 0:
        # black has no chromaticity, use the white point
        return 0.3127, 0.3290
    return round(X / total, 4), round(Y / total, 4)
