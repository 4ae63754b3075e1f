CONFIG = {
    'env': None,

    'spatial': {
        # Raise GeometryParseError instead of returning None for values that
        # can't be parsed.
        'strict': False,
        # Reject geometries whose kind does not match the column kind.
        'validate_geometry_type': False,
        # Case of EWKB hex digits, `upper` or `lower`.
        'hex_case': 'upper',
    },

    'log': {
        'dir': '~/.pgspatial_logs',
        'level': 'WARNING',
    },
}
