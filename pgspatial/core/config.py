from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import functools
import importlib.resources
import logging
import os
import pathlib

from ruamel.yaml import YAML

from pgspatial.config import CONFIG
from pgspatial.exceptions import ConfigLocked
from pgspatial.utils.schema import NA

Key = Tuple[str, ...]

yaml = YAML(typ='safe')

log = logging.getLogger(__name__)

ENV_PREFIX = 'PGSPATIAL_'

# Option schema, with option types and defaults.
SCHEMA: Dict[str, Any] = yaml.load(
    importlib.resources.files('pgspatial').
    joinpath('config.yml').
    read_text()
)


def read_config(envfile=None, environ=None) -> RawConfig:
    return RawConfig([
        PyDict('pgspatial', CONFIG),
        EnvFile('envfile', envfile or '.env'),
        EnvVars('envvars', os.environ if environ is None else environ),
    ])


@functools.lru_cache(maxsize=1)
def get_default_config() -> RawConfig:
    rc = read_config()
    rc.lock()
    return rc


class ConfigSource:
    """Flat mapping of option keys to values read from a single source.

    Keys are tuples, `('spatial', 'strict')` for the `spatial.strict` option.
    Options of a named environment are stored under
    `('environments', env, ...)`.
    """

    def __init__(self, name: str, values: Dict[Key, Any]):
        self.name = name
        self.values = values

    def __repr__(self):
        return f'<{type(self).__name__} name={self.name!r}>'

    def get(self, key: Key, env: Optional[str] = None) -> Any:
        if env:
            value = self.values.get(('environments', env) + key, NA)
            if value is not NA:
                return value
        return self.values.get(key, NA)


class PyDict(ConfigSource):
    # Nested dicts and dotted keys can be mixed:
    #   {'spatial': {'strict': True}} == {'spatial.strict': True}

    def __init__(self, name: str, params: Mapping[str, Any]):
        super().__init__(name, dict(_flatten(params)))


class EnvVars(ConfigSource):
    # PGSPATIAL_SPATIAL__HEX_CASE=lower        -> spatial.hex_case
    # PGSPATIAL_PROD__SPATIAL__HEX_CASE=lower  -> environments.prod.spatial.hex_case

    def __init__(self, name: str, environ: Mapping[str, str]):
        values = {}
        for var, value in environ.items():
            if not var.startswith(ENV_PREFIX):
                continue
            key = tuple(var[len(ENV_PREFIX):].lower().split('__'))
            if len(key) > 1 and key[0] not in SCHEMA and key[1] in SCHEMA:
                key = ('environments',) + key
            values[key] = value
        super().__init__(name, values)


class EnvFile(EnvVars):

    def __init__(self, name: str, path: str):
        super().__init__(name, dict(_read_envfile(pathlib.Path(path))))


class RawConfig:
    """Configuration options read from a stack of sources.

    Later sources override earlier ones. Options missing from all sources
    fall back to defaults from `config.yml`.

    If the `env` option is set, options of that environment override plain
    options of the same source.
    """

    def __init__(self, sources: Optional[List[ConfigSource]] = None):
        self.sources = list(sources or [])
        self._locked = False

    def add(self, name: str, params: Mapping[str, Any]) -> RawConfig:
        if self._locked:
            raise ConfigLocked()
        log.debug("Adding config source %s.", name)
        self.sources.append(PyDict(name, params))
        return self

    def fork(self, params: Optional[Mapping[str, Any]] = None) -> RawConfig:
        rc = RawConfig(self.sources)
        if params:
            rc.add('fork', params)
        return rc

    def lock(self):
        self._locked = True

    def get(self, *key: str, default=NA, cast=None, origin=False) -> Any:
        env, _ = self._lookup(('env',))
        value, source = self._lookup(key, None if env is NA else env)
        if value is NA:
            value = _get_default(key) if default is NA else default
        if cast is not None and value is not None:
            value = cast(value)
        if origin:
            return value, (source.name if source else '')
        return value

    def _lookup(self, key: Key, env: Optional[str] = None):
        for source in reversed(self.sources):
            value = source.get(key, env)
            if value is not NA:
                return value, source
        return NA, None


def _flatten(params: Mapping[str, Any], prefix: Key = ()) -> Iterator[Tuple[Key, Any]]:
    for name, value in params.items():
        key = prefix + tuple(name.split('.'))
        if isinstance(value, Mapping):
            yield from _flatten(value, key)
        else:
            yield key, value


def _read_envfile(path: pathlib.Path) -> Iterator[Tuple[str, str]]:
    if not path.exists():
        return
    with path.open() as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            name, value = line.split('=', 1)
            yield name.strip(), value.strip()


def _get_default(key: Key) -> Any:
    schema = {'items': SCHEMA}
    for name in key:
        schema = schema.get('items', {}).get(name)
        if schema is None:
            return None
    return schema.get('default')
