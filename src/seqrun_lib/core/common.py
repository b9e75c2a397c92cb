# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from functools import lru_cache

import yaml

from .logger import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def load_yaml_loader() -> type[yaml.SafeLoader]:
    """Return the fastest available safe YAML loader (CSafeLoader if possible)."""
    try:
        from yaml import CSafeLoader as SafeLoader

        logger.debug("Loaded YAML CLoader.")
    except ImportError:
        from yaml import SafeLoader

        logger.debug("Loaded default YAML loader.")

    return SafeLoader


def truncate(text: str, max_length: int) -> str:
    """
    Shorten a single-line representation of `text` to at most `max_length` characters.

    Args:
        text (str): Text to shorten. Newlines are replaced by spaces.
        max_length (int): Maximal length of the returned string.

    Returns:
        str: The original text or its prefix ending with an ellipsis.
    """
    text = " ".join(text.split())
    if len(text) <= max_length:
        return text
    return text[: max(max_length - 1, 0)] + "…"
