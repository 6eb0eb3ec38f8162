"""Configuration parsing modules for mozcpp."""

from .fragment_parser import FragmentReadError, parse_fragment, parse_fragment_text
from .settings import Settings, SettingsError

__all__ = [
    "FragmentReadError",
    "parse_fragment",
    "parse_fragment_text",
    "Settings",
    "SettingsError",
]
