import string
from functools import lru_cache
from typing import Optional
from typing import Union

from pyproj import CRS


HEX_DIGITS = frozenset(string.hexdigits)

# First byte of WKB is the byte order flag.
WKB_BYTE_ORDER_MARKS = ('\x00', '\x01')


def is_binary_string(value: Union[str, bytes, bytearray, memoryview]) -> bool:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return True
    return (
        value[:1] in WKB_BYTE_ORDER_MARKS or
        (len(value) >= 4 and all(c in HEX_DIGITS for c in value[:4]))
    )


@lru_cache
def get_crs(srid: int) -> Optional[CRS]:
    if not srid:
        return None
    return CRS.from_user_input(srid)
