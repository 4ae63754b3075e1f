"""Parser for PostGIS spatial column type declarations.

Database catalogs report spatial columns as strings like these:

    geometry
    geometry(Point)
    geometry(Point,4326)
    geography(PointZ,4326)
    public.geometry(Polygon,4326) NOT NULL

Grammar accepted by `SqlTypeParser`:

    declaration := [qualifier "."] base [ "(" params ")" ] modifier*
    base        := "geometry" | "geography"
    params      := param ("," param)*

"""
from __future__ import annotations

import itertools
import logging
import string
from typing import List
from typing import NamedTuple
from typing import Optional

from pgspatial.exceptions import InvalidSqlType


log = logging.getLogger(__name__)


SPATIAL_BASE_TYPES = ('geometry', 'geography')


class SqlType(NamedTuple):
    geo_type: Optional[str] = None
    srid: int = 0
    has_z: bool = False
    has_m: bool = False


class SqlTypeParser:

    def __init__(self, sql_type: str):
        self.sql_type = sql_type
        self.pos = 0

    def parse(self) -> SqlType:
        self.base()
        self._skip_whitespace()
        self._expect('(')
        params = self._params()
        self._expect(')')
        # Anything after the closing bracket is a column modifier, like
        # NOT NULL, and does not change the type.
        geo_type, has_z, has_m = self._kind(params[0] if params else '')
        srid = self._srid(params[-1] if params else '')
        return SqlType(geo_type, srid, has_z, has_m)

    def base(self) -> str:
        """Parse base type name and return it in lower case."""
        self._skip_whitespace()
        name = self._base()
        if self._peek() and not (self._peek() == '(' or self._peek().isspace()):
            raise self._error(f"unexpected {self._peek()!r} after type name")
        return name.lower()

    def _error(self, reason: str) -> InvalidSqlType:
        return InvalidSqlType(sql_type=self.sql_type, pos=self.pos, reason=reason)

    def _peek(self) -> str:
        return self.sql_type[self.pos:self.pos + 1]

    def _skip_whitespace(self):
        while self._peek().isspace():
            self.pos += 1

    def _expect(self, char: str):
        if self._peek() != char:
            found = self._peek() or 'end of string'
            raise self._error(f"expected {char!r}, found {found!r}")
        self.pos += 1

    def _name(self) -> str:
        start = self.pos
        while self._peek() and (self._peek().isalnum() or self._peek() in '_"'):
            self.pos += 1
        return self.sql_type[start:self.pos].strip('"')

    def _base(self) -> str:
        name = self._name()
        # Skip schema qualifiers, like public.geometry.
        while self._peek() == '.':
            self.pos += 1
            name = self._name()
        if name.lower() not in SPATIAL_BASE_TYPES:
            raise self._error(
                f"expected one of {', '.join(SPATIAL_BASE_TYPES)}, found {name!r}"
            )
        return name

    def _params(self) -> List[str]:
        start = self.pos
        while self._peek() and self._peek() != ')':
            self.pos += 1
        if not self._peek():
            raise self._error("unclosed bracket")
        body = self.sql_type[start:self.pos]
        if not body.strip():
            return []
        return body.split(',')

    def _kind(self, param: str):
        # PointZM -> ('Point', True, True)
        letters = ''.join(itertools.takewhile(str.isalpha, param.strip()))
        has_z = has_m = False
        suffix = letters[-2:].upper()
        if len(letters) > 2 and suffix == 'ZM':
            letters, has_z, has_m = letters[:-2], True, True
        elif len(letters) > 1 and suffix[-1:] == 'Z':
            letters, has_z = letters[:-1], True
        elif len(letters) > 1 and suffix[-1:] == 'M':
            letters, has_m = letters[:-1], True
        return (letters or None), has_z, has_m

    def _srid(self, param: str) -> int:
        # ASCII digits only, int() rejects superscript digits.
        digits = itertools.takewhile(
            lambda c: c in string.digits,
            itertools.dropwhile(lambda c: c not in string.digits, param),
        )
        digits = ''.join(digits)
        return int(digits) if digits else 0


def parse_sql_type(sql_type: Optional[str]) -> SqlType:
    """Parse spatial column type declaration, never raising.

    Declarations without the bracketed form, like `geometry` or any other
    non spatial type, are returned as a literal geometry kind.
    """
    if not sql_type:
        return SqlType()
    try:
        return SqlTypeParser(sql_type).parse()
    except InvalidSqlType as e:
        log.debug("Using %r as a literal geometry type: %s", sql_type, e.message)
        return SqlType(sql_type)


def get_base_type(sql_type: Optional[str]) -> Optional[str]:
    """Return `geometry` or `geography` base name of given type declaration."""
    if not sql_type:
        return None
    try:
        return SqlTypeParser(sql_type).base()
    except InvalidSqlType:
        return None


def is_spatial_sql_type(sql_type: Optional[str]) -> bool:
    return get_base_type(sql_type) is not None
