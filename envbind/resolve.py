"""
Value resolution: which string, if any, a field receives.
"""

import logging
from collections.abc import Mapping
from typing import NamedTuple

from envbind.errors import MissingRequiredError

logger = logging.getLogger(__name__)


class Resolution(NamedTuple):
    value: str
    source: str  # "env", "alias", "smushed" or "default"


def resolve(
    key: str,
    alias_key: str,
    default: str,
    required: bool,
    env: Mapping[str, str],
    smushed_key: str = "",
) -> Resolution | None:
    """
    Resolve the raw value for one field.

    The prefixed key wins over the alias key, then the smushed key, then the
    default. An empty default counts as no default. A key that is present
    but empty is a value. Returns None when the field should be left
    untouched; raises MissingRequiredError when it is required and nothing
    was found.
    """
    if key in env:
        return Resolution(env[key], "env")
    if alias_key and alias_key in env:
        logger.debug("%s not set, using alias %s", key, alias_key)
        return Resolution(env[alias_key], "alias")
    if smushed_key and smushed_key in env:
        logger.debug("%s not set, using %s", key, smushed_key)
        return Resolution(env[smushed_key], "smushed")
    if default:
        logger.debug("%s not set, using default", key)
        return Resolution(default, "default")
    if required:
        raise MissingRequiredError(alias_key or key)
    logger.debug("%s not set, skipping", key)
    return None
