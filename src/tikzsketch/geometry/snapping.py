"""
Angle and coordinate snapping.

Angles are measured in degrees in mathematical orientation: screen space
has y growing downward, so the y delta is negated before ``atan2``.
"""

import math


def round_to_multiple(value, multiple):
    """
    Round value to the nearest multiple, ties away from zero.

    Rounds the magnitude and restores the sign, so the result is
    symmetric: round_to_multiple(-v, m) == -round_to_multiple(v, m).
    """
    base = abs(value)
    mult = abs(multiple)
    remainder = base % mult

    if remainder < mult / 2:
        base -= remainder
    else:
        base += mult - remainder

    return -base if value < 0 else base


def round_to_grid(value, grid=0.5):
    """Snap a TikZ coordinate to the grid."""
    return round_to_multiple(value, grid)


def snap_angle(angle, step=45):
    """
    Round an angle to the nearest multiple of step.

    Result lies in (-180, 180]; -180 becomes 180 and -0 becomes +0.
    """
    snapped = float(round_to_multiple(angle, step))
    if snapped == -180:
        snapped = 180.0
    if snapped == 0:
        snapped = 0.0
    return snapped


def angle_from_to(begin, end):
    """Direction from begin to end in degrees, y axis pointing up."""
    dx = end[0] - begin[0]
    dy = end[1] - begin[1]
    return math.degrees(math.atan2(-dy, dx))


def is_horizontal_or_vertical(angle, threshold=5.0):
    """Check whether an angle lies within threshold of a multiple of 90 degrees."""
    remainder = abs(angle) % 90
    return remainder < threshold or remainder > 90 - threshold


def format_number(value, digits=2):
    """
    Format a number the way TikZ source is written by hand.

    Integers print without a decimal point, fractions without trailing
    zeros, and negative zero prints as 0.
    """
    value = round(float(value), digits) + 0.0
    if value.is_integer():
        return str(int(value))
    return str(value)
