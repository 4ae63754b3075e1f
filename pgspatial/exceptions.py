from typing import Any, Dict, Optional


class UnknownValue:

    def __str__(self):
        return '[UNKNOWN]'

    __repr__ = __str__


UNKNOWN_VALUE = UnknownValue()


class _TemplateContext(dict):

    def __missing__(self, key):
        return UNKNOWN_VALUE


def resolve_context_vars(this: Optional[Any], kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """Build error context from the failing component and given kwargs.

    If `this` is given, usually a `Spatial` column type, context starts with
    the component name, followed by values from `this.get_error_context()`.
    """
    context = {}
    if this is not None:
        context['component'] = type(this).__module__ + '.' + type(this).__name__
        if hasattr(this, 'get_error_context'):
            context.update(this.get_error_context())
    context.update(kwargs)
    return {
        k: v if isinstance(v, (int, float, str)) and not isinstance(v, bool) else str(v)
        for k, v in context.items()
    }


class BaseError(Exception):
    type: str = None
    template: str = None
    context: Dict[str, Any] = {}

    def __init__(self, this: Optional[Any] = None, **kwargs):
        self.type = this.type if isinstance(getattr(this, 'type', None), str) else 'system'
        self.context = resolve_context_vars(this, kwargs)

    def __str__(self):
        return (
            self.message + '\n' +
            ('  Context:\n' if self.context else '') +
            ''.join(
                f'    {k}: {v}\n'
                for k, v in self.context.items()
            )
        )

    @property
    def message(self) -> str:
        # Missing template variables are rendered as [UNKNOWN].
        return self.template.format_map(_TemplateContext(self.context))


class UserError(BaseError):
    pass


class ConfigError(BaseError):
    template = "Invalid configuration option {option!r} value {value!r}, expected one of {expected}."


class ConfigLocked(BaseError):
    template = "Configuration is locked, use `rc.fork()` if you need to change configuration."


class InvalidSqlType(UserError):
    template = "Can't parse spatial type {sql_type!r} at position {pos}: {reason}."


class GeometryParseError(UserError):
    template = "Can't parse {format} geometry value: {error}."


class UnsupportedGeometryValue(UserError):
    template = "Can't serialize value of type {value_type!r} as a geometry."


class GeometryTypeMismatch(UserError):
    template = "Geometry of type {given!r} can't be stored in {expected!r} column."


class SRIDNotSetForGeometry(BaseError):
    template = "Geometry SRID is required, but was given None."
