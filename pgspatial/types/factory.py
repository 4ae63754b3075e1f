from __future__ import annotations

import dataclasses
import string
from typing import Optional
from typing import Union

import shapely
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry

from pgspatial.exceptions import GeometryParseError


# Kinds accepting any geometry.
GENERIC_GEOMETRY_TYPES = {
    'geometry',
    'geography',
}


@dataclasses.dataclass(frozen=True)
class SpatialFactory:
    """Geometry parsing and encoding context of a single spatial column.

    Parsed geometries get the factory `srid`, unless the value carries its own
    (EWKB or EWKT), and coordinates are coerced to the factory dimensions.
    """
    geo_type: Optional[str] = None
    has_z: bool = False
    has_m: bool = False
    srid: int = 0
    hex_case: str = 'upper'

    @property
    def output_dimension(self) -> int:
        return 2 + self.has_z + self.has_m

    def parse_wkt(self, text: str) -> BaseGeometry:
        srid = None
        if text[:5].upper() == 'SRID=':
            # EWKT: SRID=4326;POINT(1 2)
            prefix, sep, text = text.partition(';')
            srid_text = prefix[5:].strip()
            if not sep or not srid_text or not all(c in string.digits for c in srid_text):
                raise GeometryParseError(format='EWKT', error=f"invalid SRID prefix {prefix!r}")
            srid = int(srid_text)
        try:
            geometry = shapely.from_wkt(text)
        except GEOSException as e:
            raise GeometryParseError(format='WKT', error=str(e)) from e
        return self.finalize(geometry, srid)

    def parse_wkb(self, data: Union[str, bytes, bytearray, memoryview]) -> BaseGeometry:
        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        try:
            if isinstance(data, str) and data[:1] in ('\x00', '\x01'):
                # Raw WKB bytes carried in a str.
                data = data.encode('latin-1')
            elif isinstance(data, bytes) and data[:1] not in (b'\x00', b'\x01'):
                # Hex encoded WKB given as bytes.
                data = data.decode('ascii')
            geometry = shapely.from_wkb(data)
        except (GEOSException, ValueError) as e:
            raise GeometryParseError(format='WKB', error=str(e)) from e
        return self.finalize(geometry)

    def generate(self, geometry: BaseGeometry) -> str:
        if not shapely.get_srid(geometry) and self.srid:
            geometry = shapely.set_srid(geometry, self.srid)
        ewkb = shapely.to_wkb(
            geometry,
            hex=True,
            output_dimension=self.output_dimension,
            include_srid=True,
        )
        return ewkb.lower() if self.hex_case == 'lower' else ewkb.upper()

    def check_type(self, geometry: BaseGeometry) -> bool:
        if not self.geo_type or self.geo_type.lower() in GENERIC_GEOMETRY_TYPES:
            return True
        return geometry.geom_type.lower() == self.geo_type.lower()

    def finalize(self, geometry: BaseGeometry, srid: Optional[int] = None) -> BaseGeometry:
        """Apply column srid and dimensions to a parsed geometry.

        Given `srid` wins, then the geometry own srid, then the column srid.
        """
        if srid is None:
            srid = shapely.get_srid(geometry) or self.srid
        geometry = self._coerce_dimensions(geometry)
        return shapely.set_srid(geometry, srid)

    def _coerce_dimensions(self, geometry: BaseGeometry) -> BaseGeometry:
        if self.has_z and not shapely.has_z(geometry):
            return shapely.force_3d(geometry)
        if not self.has_z and not self.has_m and shapely.has_z(geometry):
            return shapely.force_2d(geometry)
        return geometry
