"""
Exceptions raised while binding environment variables to a config schema.
Every failure of a process() call surfaces as exactly one of these.
"""


class ConfigValidationError(Exception):
    """Base class for every error raised by envbind."""


class InvalidSpecificationError(ConfigValidationError, TypeError):
    """Raised when the target is not a dataclass instance."""

    def __init__(self, spec: object):
        self.spec = spec
        super().__init__(
            f"invalid specification: expected a dataclass instance, got {type(spec).__name__}"
        )


class MissingRequiredError(ConfigValidationError):
    """Raised when a Required field has no value, no alias value and no default."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"required key {key} missing value")


class ParseError(ConfigValidationError):
    """Raised when a resolved value cannot be converted to the field's type."""

    def __init__(self, key_name: str, field_name: str, type_name: str, value: str, err: Exception):
        self.key_name = key_name
        self.field_name = field_name
        self.type_name = type_name
        self.value = value
        self.err = err
        super().__init__(
            f"assigning {key_name} to {field_name}: "
            f"converting '{value}' to type {type_name}. details: {err}"
        )


class MalformedIndexError(ConfigValidationError):
    """Raised when the indexed keys of a list-of-records field are not 0..n-1."""

    def __init__(self, prefix: str, key: str | None = None, count: int | None = None):
        self.prefix = prefix
        self.key = key
        self.count = count
        if key is not None:
            msg = f"malformed index in key {key} under prefix {prefix}"
        else:
            msg = f"indices under prefix {prefix} are not contiguous from 0 to {count - 1}"
        super().__init__(msg)
