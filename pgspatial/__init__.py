import importlib.metadata

from pgspatial.types.spatial import Spatial
from pgspatial.types.sqltype import SqlType
from pgspatial.types.sqltype import parse_sql_type

__version__ = importlib.metadata.version(__name__)

__all__ = [
    'Spatial',
    'SqlType',
    'parse_sql_type',
]
