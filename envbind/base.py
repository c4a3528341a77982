"""
Reflection-based config loader.
Walks a dataclass schema, resolves env vars, coerces types and writes them back.
"""

import dataclasses
import logging
from collections.abc import Mapping
from typing import IO, Any, Callable, TypeVar

from envbind.coerce import UNCHANGED, coerce
from envbind.decoders import DecoderRegistry
from envbind.descriptors import zero_record
from envbind.errors import InvalidSpecificationError, MissingRequiredError, ParseError
from envbind.resolve import resolve
from envbind.source import EnvSnapshot, snapshot
from envbind.walker import VarInfo, gather_info

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProcessFunc = Callable[..., Any]


def _convert(info: VarInfo, raw: str, registry: DecoderRegistry | None) -> Any:
    try:
        if info.tags.coerce is not None:
            return info.tags.coerce(raw)
        return coerce(raw, info.desc, registry, info.tags.sep)
    except Exception as err:
        raise ParseError(info.key, info.name, info.desc.name, raw, err) from err


def process(
    prefix: str,
    spec: T,
    env: Mapping[str, str] | None = None,
    registry: DecoderRegistry | None = None,
) -> T:
    """
    Populate the dataclass instance spec from the environment.

    - prefix: prepended to every key ("app" -> APP_PORT). May be empty.
    - env: mapping to read from (default: a snapshot of os.environ).
    - registry: decoders for types that cannot decode themselves.
    - Returns: spec, updated in place. Fields with nothing to read keep their value.
    - Raises: MissingRequiredError, ParseError, MalformedIndexError,
      InvalidSpecificationError. Stops at the first error.
    """
    env = snapshot(env)
    logger.debug("processing %s with prefix %r", type(spec).__name__, prefix)
    infos = gather_info(prefix, spec, env, registry)

    for info in infos:
        if info.expands:
            if info.count == 0 and info.tags.required:
                raise MissingRequiredError(info.alt or info.key)
            continue

        resolved = resolve(
            info.key, info.alt, info.tags.default, info.tags.required, env, info.smushed
        )
        if resolved is None:
            continue

        value = _convert(info, resolved.value, registry)
        if value is UNCHANGED:
            continue
        info.assign(value)
        logger.debug("%s assigned from %s", info.key, resolved.source)

    return spec


def load_config(
    schema_class: type[T],
    env: Mapping[str, str] | None = None,
    prefix: str = "",
    registry: DecoderRegistry | None = None,
) -> T:
    """
    Load config from environment by introspecting the schema class.

    - schema_class: a dataclass with type-annotated fields
    - env: dict to read from (default: os.environ). Pass a dict for tests.
    - Returns: new instance of schema_class; fields without a dataclass
      default start from their zero value ("", 0, [], None, ...)
    - Raises: the same errors as process()
    """
    if not isinstance(schema_class, type) or not dataclasses.is_dataclass(schema_class):
        raise InvalidSpecificationError(schema_class)
    return process(prefix, zero_record(schema_class), env, registry)


def new_reader(stream: IO[str]) -> ProcessFunc:
    """
    Read KEY=VALUE lines from stream and return a process() bound to them.

        proc = new_reader(open("app.env"))
        proc("app", config)
    """
    env = EnvSnapshot.from_stream(stream)

    def process_func(prefix: str, spec: T, registry: DecoderRegistry | None = None) -> T:
        return process(prefix, spec, env, registry)

    return process_func
