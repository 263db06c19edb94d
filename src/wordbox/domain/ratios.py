"""Integer percentages for display."""


def percent(part: int, whole: int) -> int:
    """
    ``part`` as a whole-number percentage of ``whole``, halves rounded up.

    Returns 0 when ``whole`` is 0. Both values are non-negative counts.
    """
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)
