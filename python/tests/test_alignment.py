import pytest

from ktx2_py.alignment import align_up, padding_for
from ktx2_py.errors import FormatError, InvalidAlignment


@pytest.mark.parametrize("offset,boundary,expected", [
    (0, 4, 0),
    (1, 4, 4),
    (4, 4, 4),
    (5, 8, 8),
    (120, 8, 120),
    (121, 8, 128),
    (2**40 + 1, 8, 2**40 + 8),
])
def test_align_up_values(offset, boundary, expected):
    assert align_up(offset, boundary) == expected


@pytest.mark.parametrize("boundary", [4, 8])
def test_align_up_properties(boundary):
    for x in range(0, 2048):
        r = align_up(x, boundary)
        assert r % boundary == 0
        assert r >= x
        assert r - x < boundary


@pytest.mark.parametrize("boundary", [0, -4, 3, 6, 12])
def test_align_up_rejects_non_power_of_two(boundary):
    with pytest.raises(InvalidAlignment) as exc:
        align_up(10, boundary)
    assert exc.value.field == "boundary"
    assert isinstance(exc.value, FormatError)
    assert isinstance(exc.value, ValueError)


def test_align_up_rejects_negative_offset():
    with pytest.raises(InvalidAlignment):
        align_up(-1, 4)


def test_padding_for():
    assert padding_for(121, 8) == 7
    assert padding_for(120, 4) == 0
    assert padding_for(118, 4) == 2
