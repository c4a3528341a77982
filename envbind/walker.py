"""
Structure walker.

gather_info() visits the fields of a dataclass instance in declaration order
and returns one VarInfo per leaf field, with its key already derived.
Nested dataclasses are flattened into the list; lists of dataclasses are
sized from the indexed keys present in the snapshot (APP_SERVERS_0_HOST,
APP_SERVERS_1_HOST, ...) and expanded element by element.
"""

import dataclasses
import logging
import typing
from dataclasses import dataclass
from typing import Any

from envbind.decoders import DecoderRegistry
from envbind.descriptors import (
    RecordType,
    TypeDescriptor,
    describe,
    is_record_list,
    strip_annotated,
    unwrap_pointer,
    zero_record,
)
from envbind.errors import InvalidSpecificationError, MalformedIndexError
from envbind.naming import derive_key, smushed_key
from envbind.source import EnvSnapshot
from envbind.tags import FieldTags

logger = logging.getLogger(__name__)


@dataclass
class VarInfo:
    """One environment variable a schema reads, bound to the field it fills."""

    name: str
    key: str
    alt: str
    owner: Any
    attr: str
    desc: TypeDescriptor
    tags: FieldTags
    # unsplit fallback key, "" unless the field accepts it
    smushed: str = ""
    # list of dataclasses expanded from indexed keys
    expands: bool = False
    count: int = 0

    def assign(self, value: Any) -> None:
        setattr(self.owner, self.attr, value)


def _field_metadata(f: dataclasses.Field, hint: Any) -> list[Any]:
    """Tags from field(metadata=...) followed by those in Annotated[...]."""
    metadata = list(f.metadata.values()) if f.metadata else []
    _, extras = strip_annotated(hint)
    return metadata + extras


def _decodes_itself(target: TypeDescriptor, tags: FieldTags, registry: DecoderRegistry | None) -> bool:
    if tags.coerce is not None:
        return True
    return registry is not None and registry.lookup(target.hint) is not None


def gather_info(
    prefix: str,
    spec: Any,
    env: EnvSnapshot,
    registry: DecoderRegistry | None = None,
    in_sequence: bool = False,
) -> list[VarInfo]:
    """
    Walk spec and return the variables it reads, in declaration order.

    Allocates None Optional[dataclass] fields and list-of-dataclass fields
    on the way down, so the returned VarInfo objects point at live storage.
    """
    if not dataclasses.is_dataclass(spec) or isinstance(spec, type):
        raise InvalidSpecificationError(spec)

    hints = typing.get_type_hints(type(spec), include_extras=True)
    infos: list[VarInfo] = []

    for f in dataclasses.fields(spec):
        if f.name.startswith("_"):
            continue
        hint = hints[f.name]
        tags = FieldTags.from_metadata(_field_metadata(f, hint))
        if tags.ignored:
            continue

        desc = describe(hint)
        key, alt = derive_key(prefix, f.name, tags.split_words, tags.alias, in_sequence)
        info = VarInfo(f.name, key, alt, spec, f.name, desc, tags)
        if tags.accept_smushed:
            info.smushed = smushed_key(prefix, f.name, key)
        target = unwrap_pointer(desc)

        if isinstance(target, RecordType) and not _decodes_itself(target, tags, registry):
            nested = getattr(spec, f.name)
            if nested is None:
                nested = zero_record(target.hint)
                setattr(spec, f.name, nested)
            # aliases are void inside list elements
            flatten = tags.embedded and (in_sequence or not tags.alias)
            inner_prefix = prefix if flatten else key
            infos.extend(gather_info(inner_prefix, nested, env, registry, in_sequence))
            continue

        if is_record_list(desc) and not _decodes_itself(desc, tags, registry):
            infos.append(info)
            infos.extend(_expand_records(info, env, registry, in_sequence))
            continue

        infos.append(info)

    return infos


def _expand_records(
    info: VarInfo,
    env: EnvSnapshot,
    registry: DecoderRegistry | None,
    in_sequence: bool,
) -> list[VarInfo]:
    base = info.key
    found = env.indices(base)
    if not found and info.alt and not in_sequence:
        base = info.alt
        found = env.indices(base)
    info.expands = True
    if not found:
        return []

    count = max(found) + 1
    if len(found) != count:
        raise MalformedIndexError(base, count=count)

    elem = unwrap_pointer(info.desc).elem
    elements = [zero_record(elem.hint) for _ in range(count)]
    info.assign(elements)
    info.count = count
    logger.debug("%s expands to %d elements", base, count)

    infos: list[VarInfo] = []
    for i, element in enumerate(elements):
        infos.extend(gather_info(f"{base}_{i}", element, env, registry, in_sequence=True))
    return infos
