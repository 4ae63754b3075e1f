from __future__ import annotations

import functools
import logging
from typing import Any
from typing import Optional
from typing import Union

from geoalchemy2 import WKBElement
from geoalchemy2 import WKTElement
from geoalchemy2.shape import to_shape
from pyproj import CRS
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry
from sqlalchemy.types import UserDefinedType

from pgspatial.core.config import RawConfig
from pgspatial.core.config import get_default_config
from pgspatial.exceptions import GeometryParseError
from pgspatial.exceptions import GeometryTypeMismatch
from pgspatial.exceptions import SRIDNotSetForGeometry
from pgspatial.exceptions import UnsupportedGeometryValue
from pgspatial.types.factory import SpatialFactory
from pgspatial.types.helpers import get_crs
from pgspatial.types.helpers import is_binary_string
from pgspatial.types.sqltype import SqlType
from pgspatial.types.sqltype import parse_sql_type
from pgspatial.utils.config import get_spatial_options


log = logging.getLogger(__name__)

StringValue = Union[str, bytes, bytearray, memoryview]


class Spatial(UserDefinedType):
    """PostGIS `geometry` or `geography` column type.

    Column metadata is parsed once from `sql_type`, the type string reported
    by the database catalog, for example `geometry(PointZ,4326)`.

    Values are written as hex encoded EWKB, always including SRID. Stored
    values are read back as shapely geometries. Values that can't be parsed
    are read as None, unless `strict` is set.

    Args:
        oid: database type oid, kept for the host ORM.
        sql_type: column type declaration.
        rc: configuration, used for options not given explicitly.
        strict: raise `GeometryParseError` on unparseable values.
        validate: reject geometries of a kind other than the column kind.
        hex_case: `upper` or `lower` EWKB hex digits.

    """
    cache_ok = True

    def __init__(
        self,
        oid: Optional[int] = None,
        sql_type: str = 'geometry',
        rc: Optional[RawConfig] = None,
        strict: Optional[bool] = None,
        validate: Optional[bool] = None,
        hex_case: Optional[str] = None,
    ):
        options = get_spatial_options(rc or get_default_config())
        self.oid = oid
        self.sql_type = sql_type
        self.strict = options.strict if strict is None else strict
        self.validate = options.validate_geometry_type if validate is None else validate
        self.hex_case = options.hex_case if hex_case is None else hex_case
        self._parsed: SqlType = parse_sql_type(sql_type)

    def __repr__(self):
        return f'{type(self).__name__}({self.oid!r}, {self.sql_type!r})'

    def get_error_context(self):
        return {
            'type': self.type,
            'sql_type': self.sql_type,
            'geo_type': self.geo_type,
            'srid': self.srid,
        }

    @property
    def geo_type(self) -> Optional[str]:
        return self._parsed.geo_type

    @property
    def srid(self) -> int:
        return self._parsed.srid

    @property
    def has_z(self) -> bool:
        return self._parsed.has_z

    @property
    def has_m(self) -> bool:
        return self._parsed.has_m

    @property
    def geographic(self) -> bool:
        return 'geography' in self.sql_type

    @property
    def spatial(self) -> bool:
        return True

    @property
    def type(self) -> str:
        return 'geography' if self.geographic else 'geometry'

    @property
    def crs(self) -> Optional[CRS]:
        return get_crs(self.srid)

    def get_crs(self, required: bool = False) -> Optional[CRS]:
        if required and not self.srid:
            raise SRIDNotSetForGeometry(self)
        return self.crs

    @functools.cached_property
    def spatial_factory(self) -> SpatialFactory:
        return SpatialFactory(
            geo_type=self.geo_type,
            has_z=self.has_z,
            has_m=self.has_m,
            srid=self.srid,
            hex_case=self.hex_case,
        )

    def cast(self, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, (WKBElement, WKTElement)):
            return self._from_element(value)
        if isinstance(value, (str, bytes, bytearray, memoryview)):
            return self._parse(value)
        return value

    deserialize = cast

    def serialize(self, value: Any) -> Optional[str]:
        if value is None:
            return None
        geometry = self.cast(value)
        if geometry is None:
            return None
        if not isinstance(geometry, BaseGeometry):
            raise UnsupportedGeometryValue(self, value_type=type(value).__name__)
        # Geometry kind is not checked against column kind by default, for
        # example a LineString can be written to a Point column.
        if self.validate and not self.spatial_factory.check_type(geometry):
            raise GeometryTypeMismatch(
                self,
                given=geometry.geom_type,
                expected=self.geo_type,
            )
        return self.spatial_factory.generate(geometry)

    def get_col_spec(self, **kw) -> str:
        head, sep, _ = self.sql_type.partition(')')
        if sep:
            return (head + sep).strip()
        return self.sql_type.strip().partition(' ')[0] or 'geometry'

    def bind_processor(self, dialect):
        return self.serialize

    def result_processor(self, dialect, coltype):
        return self.deserialize

    def _parse(self, value: StringValue) -> Optional[BaseGeometry]:
        try:
            if is_binary_string(value):
                return self.spatial_factory.parse_wkb(value)
            else:
                return self.spatial_factory.parse_wkt(value)
        except GeometryParseError as e:
            return self._parse_failed(e)

    def _from_element(self, element: Union[WKBElement, WKTElement]) -> Optional[BaseGeometry]:
        try:
            geometry = to_shape(element)
        except GEOSException as e:
            return self._parse_failed(GeometryParseError(
                format=type(element).__name__,
                error=str(e),
            ))
        srid = element.srid if element.srid and element.srid > 0 else None
        return self.spatial_factory.finalize(geometry, srid)

    def _parse_failed(self, error: GeometryParseError) -> None:
        if self.strict:
            raise error
        log.debug("Can't parse %s value, using None: %s", self.sql_type, error.message)
        return None
