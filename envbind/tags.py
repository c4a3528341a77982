"""
Tag types for config schema definitions.
Used inside Annotated[type, ...] or dataclasses.field(metadata=...) to specify
env names, defaults and decoding rules.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable

VALID_SEPARATORS = ",;-/\\|~&#@.*+"


class Env:
    """Alias for the field: replaces the name segment of the key and is also
    looked up bare, without the prefix, when the prefixed key is not set."""

    def __init__(self, name: str):
        self.name = name


class Default:
    """Default value used when neither the key nor its alias is set."""

    def __init__(self, value: object):
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, (int, float)):
            value = str(value)
        if not isinstance(value, str):
            raise TypeError(f"Default must be a string, got {type(value).__name__}")
        self.value = value


class Required:
    """Mark field as required: a missing key with no default is an error."""

    pass


class SplitWords:
    """Derive the key from CamelCase words: MultiWordVar -> MULTI_WORD_VAR."""

    pass


class AcceptSmushed:
    """Also read the unsplit key (MULTIWORDVAR) when nothing else is set.
    Checked after the alias and before the default."""

    pass


class Ignored:
    """Never read or write this field."""

    pass


class Embedded:
    """Flatten a nested dataclass into the parent's key namespace."""

    pass


class Desc:
    """Human readable description, shown by usage()."""

    def __init__(self, text: str):
        self.text = text


class Sep:
    """Separator for list and dict fields (default: comma)."""

    def __init__(self, sep: str):
        if len(sep) != 1 or sep not in VALID_SEPARATORS:
            raise ValueError(f"invalid separator specified, {sep!r}")
        self.sep = sep


class Coerce:
    """Custom coercion function: (raw: str) -> T. Takes precedence over every built-in rule."""

    def __init__(self, fn: Callable[[str], object]):
        self.fn = fn


@dataclass(frozen=True)
class FieldTags:
    """The tags declared on one field, merged from Annotated extras and field metadata."""

    alias: str = ""
    default: str = ""
    required: bool = False
    split_words: bool = False
    accept_smushed: bool = False
    ignored: bool = False
    embedded: bool = False
    description: str = ""
    sep: str = ","
    coerce: Callable[[str], Any] | None = None

    @classmethod
    def from_metadata(cls, metadata: Iterable[Any]) -> "FieldTags":
        values: dict[str, Any] = {}
        for m in metadata:
            if isinstance(m, Env):
                values["alias"] = m.name
            elif isinstance(m, Default):
                values["default"] = m.value
            elif isinstance(m, Required) or m is Required:
                values["required"] = True
            elif isinstance(m, SplitWords) or m is SplitWords:
                values["split_words"] = True
            elif isinstance(m, AcceptSmushed) or m is AcceptSmushed:
                values["accept_smushed"] = True
            elif isinstance(m, Ignored) or m is Ignored:
                values["ignored"] = True
            elif isinstance(m, Embedded) or m is Embedded:
                values["embedded"] = True
            elif isinstance(m, Desc):
                values["description"] = m.text
            elif isinstance(m, Sep):
                values["sep"] = m.sep
            elif isinstance(m, Coerce):
                values["coerce"] = m.fn
        return cls(**values)
