from typing import Any
from typing import Dict
from typing import Optional
from typing import Type
from typing import Union

import sqlalchemy as sa
from geoalchemy2 import Geography
from geoalchemy2 import Geometry

from pgspatial.core.config import RawConfig
from pgspatial.types.spatial import Spatial
from pgspatial.types.sqltype import SPATIAL_BASE_TYPES
from pgspatial.types.sqltype import get_base_type


class SpatialTypeMap:
    """Maps database reported type names to spatial column types."""

    def __init__(self, rc: Optional[RawConfig] = None):
        self.rc = rc
        self.types: Dict[str, Type[Spatial]] = {
            name: Spatial
            for name in SPATIAL_BASE_TYPES
        }

    def register_type(self, name: str, type_: Type[Spatial] = Spatial):
        self.types[name.lower()] = type_

    def lookup(self, oid: Optional[int], sql_type: str) -> Optional[Spatial]:
        name = get_base_type(sql_type)
        if name is None or name not in self.types:
            return None
        return self.types[name](oid, sql_type, rc=self.rc)


def sql_type_from_geoalchemy(type_: Union[Geometry, Geography]) -> str:
    # Geometry(geometry_type='POINTZ', srid=4326) -> 'geometry(POINTZ,4326)'
    name = type_.name
    geometry_type = type_.geometry_type
    srid = type_.srid if type_.srid and type_.srid > 0 else None
    if srid:
        return f'{name}({geometry_type or "Geometry"},{srid})'
    if geometry_type:
        return f'{name}({geometry_type})'
    return name


def on_column_reflect(inspector, table: sa.Table, column_info: Dict[str, Any]):
    type_ = column_info.get('type')
    if isinstance(type_, (Geometry, Geography)):
        column_info['type'] = Spatial(None, sql_type_from_geoalchemy(type_))


def install_reflection_hook(target: Union[Type[sa.Table], sa.MetaData] = sa.Table):
    if not sa.event.contains(target, 'column_reflect', on_column_reflect):
        sa.event.listen(target, 'column_reflect', on_column_reflect)
