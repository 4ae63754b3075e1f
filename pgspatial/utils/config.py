import pathlib
from typing import NamedTuple
from typing import Union

from pgspatial.core.config import RawConfig
from pgspatial.exceptions import ConfigError


HEX_CASES = ('upper', 'lower')


class SpatialOptions(NamedTuple):
    strict: bool
    validate_geometry_type: bool
    hex_case: str


def asbool(s: Union[str, bool]) -> bool:
    if isinstance(s, bool):
        return s
    s = s.lower()
    if s in ("true", "1", "on", "yes"):
        return True
    if s in ("false", "0", "off", "no", ""):
        return False
    raise ValueError(f"Expected a boolean value, got {s!r}.")


def get_spatial_options(rc: RawConfig) -> SpatialOptions:
    hex_case = rc.get('spatial', 'hex_case', default='upper').lower()
    if hex_case not in HEX_CASES:
        raise ConfigError(
            option='spatial.hex_case',
            value=hex_case,
            expected=', '.join(HEX_CASES),
        )
    return SpatialOptions(
        strict=rc.get('spatial', 'strict', default=False, cast=asbool),
        validate_geometry_type=rc.get(
            'spatial', 'validate_geometry_type',
            default=False,
            cast=asbool,
        ),
        hex_case=hex_case,
    )


# Returns log directory path from rc
def get_log_dir(rc: RawConfig) -> pathlib.Path:
    return pathlib.Path(rc.get('log', 'dir', default='~/.pgspatial_logs')).expanduser()
