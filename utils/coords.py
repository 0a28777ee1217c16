WIDTH_SPAN = 3.5     # complex-plane width shown at scale 1.0
X_CENTER_DIV = 1.4   # horizontal offset divisor (puts the set's body in view)


def image_scalars(width, height, scale):
    width_scalar = WIDTH_SPAN / scale                      # always fit width
    height_scalar = (WIDTH_SPAN * height / width) / scale  # keep aspect
    return width_scalar, height_scalar


def pixel_to_complex(px, py, width, height, scale, x_delta, y_delta):
    """
    Maps pixel (px, py) of a width x height image to the complex plane.
    Returns (x0, y0, height_scalar).
    """
    width_scalar = WIDTH_SPAN / scale
    height_scalar = (WIDTH_SPAN * height / width) / scale
    tx = px - x_delta * scale
    ty = py - y_delta * scale
    x0 = (width_scalar / width) * tx - width_scalar / X_CENTER_DIV
    y0 = (height_scalar / height) * ty - height_scalar / 2
    return x0, y0, height_scalar

