"""Loaders for declarative level content."""

from .json_loader import (
    load_levels_from_json,
    parse_levels_dict,
    validate_levels_dict,
    validate_levels_file,
)

__all__ = [
    "load_levels_from_json",
    "parse_levels_dict",
    "validate_levels_dict",
    "validate_levels_file",
]
