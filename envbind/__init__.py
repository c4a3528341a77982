"""envbind: bind environment variables to dataclass config schemas."""

from envbind.base import load_config, new_reader, process
from envbind.coerce import CoercionError, coerce
from envbind.decoders import (
    BinaryUnmarshaler,
    Decoder,
    DecoderRegistry,
    Setter,
    TextUnmarshaler,
)
from envbind.descriptors import describe
from envbind.errors import (
    ConfigValidationError,
    InvalidSpecificationError,
    MalformedIndexError,
    MissingRequiredError,
    ParseError,
)
from envbind.naming import derive_key, split_words
from envbind.numeric import (
    Bits,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from envbind.resolve import resolve
from envbind.source import EnvSnapshot
from envbind.tags import (
    AcceptSmushed,
    Coerce,
    Default,
    Desc,
    Embedded,
    Env,
    Ignored,
    Required,
    Sep,
    SplitWords,
)
from envbind.unused import unused
from envbind.usage import DEFAULT_LIST_FORMAT, DEFAULT_TABLE_FORMAT, UsageFormat, usage, usagef
from envbind.walker import VarInfo, gather_info

__all__ = [
    "process",
    "load_config",
    "new_reader",
    "gather_info",
    "VarInfo",
    "unused",
    "usage",
    "usagef",
    "UsageFormat",
    "DEFAULT_TABLE_FORMAT",
    "DEFAULT_LIST_FORMAT",
    "EnvSnapshot",
    "coerce",
    "describe",
    "derive_key",
    "split_words",
    "resolve",
    "DecoderRegistry",
    "Decoder",
    "Setter",
    "TextUnmarshaler",
    "BinaryUnmarshaler",
    "ConfigValidationError",
    "InvalidSpecificationError",
    "MissingRequiredError",
    "ParseError",
    "MalformedIndexError",
    "CoercionError",
    "Env",
    "Default",
    "Required",
    "SplitWords",
    "AcceptSmushed",
    "Ignored",
    "Embedded",
    "Desc",
    "Sep",
    "Coerce",
    "Bits",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
]
