import pytest

import shapely
from shapely.geometry import Point

from pgspatial.types.helpers import get_crs
from pgspatial.types.helpers import is_binary_string


@pytest.mark.parametrize('value, binary', [
    ('\x00\x00\x00\x00\x01', True),
    ('\x01\x01\x00\x00\x00', True),
    ('0101000020E6100000', True),
    ('abcd', True),
    ('ABCDEFG', True),
    ('POINT(1 2)', False),
    ('MULTIPOINT((1 2))', False),
    ('SRID=4326;POINT(1 2)', False),
    ('01G1', False),
    ('010', False),
    ('', False),
    (b'POINT(1 2)', True),
    (memoryview(b'\x01'), True),
])
def test_is_binary_string(value, binary: bool):
    assert is_binary_string(value) is binary


def test_is_binary_string_wkb():
    assert is_binary_string(shapely.to_wkb(Point(1, 2), hex=True))


def test_get_crs():
    assert get_crs(3346).to_epsg() == 3346
    assert get_crs(3346) is get_crs(3346)


def test_get_crs_without_srid():
    assert get_crs(0) is None
