import pytest

import shapely
from shapely.geometry import Point
from shapely.geometry import Polygon

from pgspatial.exceptions import GeometryParseError
from pgspatial.types.factory import SpatialFactory


def test_parse_wkt():
    factory = SpatialFactory('Point', srid=4326)
    shape = factory.parse_wkt('POINT (1 2)')
    assert shape.equals(Point(1, 2))
    assert shapely.get_srid(shape) == 4326


def test_parse_ewkt():
    factory = SpatialFactory('Point', srid=4326)
    shape = factory.parse_wkt('srid=3346;POINT (1 2)')
    assert shapely.get_srid(shape) == 3346


@pytest.mark.parametrize('value', [
    'NOTAGEOM(1 2)',
    'POINT(1',
    'SRID=4326',
    'SRID=x;POINT(1 2)',
    'SRID=²;POINT(1 2)',
    'SRID= ;POINT(1 2)',
])
def test_parse_wkt_error(value: str):
    factory = SpatialFactory('Point', srid=4326)
    with pytest.raises(GeometryParseError):
        factory.parse_wkt(value)


def test_parse_wkb_without_srid():
    factory = SpatialFactory(srid=3346)
    shape = factory.parse_wkb(shapely.to_wkb(Point(1, 2)))
    assert shapely.get_srid(shape) == 3346


def test_parse_wkb_error():
    factory = SpatialFactory()
    with pytest.raises(GeometryParseError) as e:
        factory.parse_wkb(b'\x01\x01')
    assert e.value.context['format'] == 'WKB'


def test_parse_wkb_non_latin_string():
    factory = SpatialFactory()
    with pytest.raises(GeometryParseError):
        factory.parse_wkb('\x01ąčę')


def test_generate():
    factory = SpatialFactory('Polygon', srid=3346)
    polygon = Polygon([(0, 0), (1, 0), (1, 1), (0, 0)])
    value = factory.generate(polygon)
    assert value == value.upper()
    shape = shapely.from_wkb(value)
    assert shape.equals(polygon)
    assert shapely.get_srid(shape) == 3346


def test_generate_without_srid():
    factory = SpatialFactory('Point')
    value = factory.generate(Point(1, 2))
    # Plain WKB, without the SRID flag and SRID field.
    assert value == '0101000000000000000000F03F0000000000000040'
    assert shapely.get_srid(shapely.from_wkb(value)) == 0


def test_finalize():
    factory = SpatialFactory('Point', has_z=True, srid=4326)
    shape = factory.finalize(Point(1, 2))
    assert shapely.has_z(shape)
    assert shapely.get_srid(shape) == 4326


def test_finalize_srid_precedence():
    factory = SpatialFactory('Point', srid=4326)
    shape = shapely.set_srid(Point(1, 2), 3346)
    assert shapely.get_srid(factory.finalize(shape)) == 3346
    assert shapely.get_srid(factory.finalize(shape, 2154)) == 2154


@pytest.mark.parametrize('has_z, has_m, dimension', [
    (False, False, 2),
    (True, False, 3),
    (False, True, 3),
    (True, True, 4),
])
def test_output_dimension(has_z: bool, has_m: bool, dimension: int):
    factory = SpatialFactory('Point', has_z=has_z, has_m=has_m)
    assert factory.output_dimension == dimension


@pytest.mark.parametrize('geo_type, wkt, result', [
    ('Point', 'POINT(1 2)', True),
    ('POINT', 'POINT(1 2)', True),
    ('Point', 'LINESTRING(0 0, 1 1)', False),
    ('MultiPolygon', 'POLYGON((0 0, 1 0, 1 1, 0 0))', False),
    ('Geometry', 'LINESTRING(0 0, 1 1)', True),
    (None, 'LINESTRING(0 0, 1 1)', True),
])
def test_check_type(geo_type, wkt: str, result: bool):
    factory = SpatialFactory(geo_type)
    assert factory.check_type(shapely.from_wkt(wkt)) is result


def test_factory_is_immutable():
    factory = SpatialFactory('Point', srid=4326)
    with pytest.raises(AttributeError):
        factory.srid = 3346
