# ktx2_py/alignment.py

from .errors import InvalidAlignment


def align_up(offset: int, boundary: int) -> int:
    """
    Return the smallest multiple of 'boundary' that is >= 'offset'.

    'boundary' must be a positive power of two (the container only uses 4 and 8).
    """
    if boundary <= 0 or (boundary & (boundary - 1)) != 0:
        raise InvalidAlignment(
            "alignment boundary must be a positive power of two",
            field="boundary", expected="power of two", actual=boundary,
        )
    if offset < 0:
        raise InvalidAlignment(
            "cannot align a negative offset",
            field="offset", expected=">= 0", actual=offset,
        )

    # Same as the C (offset + boundary - 1) & ~(boundary - 1)
    return (offset + boundary - 1) & ~(boundary - 1)


def padding_for(offset: int, boundary: int) -> int:
    """Number of zero bytes needed after 'offset' to reach the next boundary."""
    return align_up(offset, boundary) - offset
