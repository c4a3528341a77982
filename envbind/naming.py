"""
Key derivation: how a field name and its tags become an environment key.
"""

import re

_WORDS = re.compile(r"([^A-Z]+|[A-Z]+[^A-Z]+|[A-Z]+)")
_ACRONYM = re.compile(r"([A-Z]+)([A-Z][^A-Z]+)")


def split_words(name: str) -> list[str]:
    """
    Split a CamelCase name into words.

    >>> split_words("MultiWordVar")
    ['Multi', 'Word', 'Var']
    >>> split_words("HTTPServer")
    ['HTTP', 'Server']
    """
    words: list[str] = []
    for word in _WORDS.findall(name):
        m = _ACRONYM.match(word)
        if m:
            words.extend(m.groups())
        else:
            words.append(word)
    return words


def join_key(prefix: str, name: str) -> str:
    if prefix:
        return f"{prefix}_{name}".upper()
    return name.upper()


def derive_key(
    prefix: str,
    field_name: str,
    split: bool = False,
    alias: str = "",
    in_sequence: bool = False,
) -> tuple[str, str]:
    """
    Return (key, alias_key) for a field.

    The alias replaces the name segment and is also returned bare as a
    fallback key. Inside an expanded list of records the alias is ignored,
    otherwise every element would read the same bare key.
    """
    if alias and not in_sequence:
        return join_key(prefix, alias), alias.upper()

    name = field_name
    if split:
        words = split_words(field_name)
        if words:
            name = "_".join(words)
    return join_key(prefix, name), ""


def smushed_key(prefix: str, field_name: str, key: str) -> str:
    """
    The unsplit key for field_name (APP_MULTIWORDVAR), or "" when it is the
    same as key and so adds nothing to look up.
    """
    smushed = join_key(prefix, field_name)
    return "" if smushed == key else smushed
