#!/usr/bin/env python3
"""
naming.py - Display names derived from content folder names

Folder names carry an optional ordering prefix and use underscores for
spaces, e.g. "03_declaration_of_independence".
"""

import re

NUMBER_PREFIX = re.compile(r"^[0-9]+[_-]")


def strip_number_prefix(name: str) -> str:
    """Remove one leading ordering prefix like "03_" or "12-"."""
    return NUMBER_PREFIX.sub("", name, count=1)


def snake_to_title(name: str) -> str:
    """
    Derive a human-readable title from a folder name.

        "03_declaration_of_independence" -> "Declaration Of Independence"
        "intro"                          -> "Intro"
        "2023meeting"                    -> "2023meeting"

    Only the first character of each word is uppercased; the rest of the
    word is left as written.
    """
    words = strip_number_prefix(name).replace("_", " ").split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words)


def display_name(name: str) -> str:
    """Folder name with underscores shown as spaces (no prefix stripping)."""
    return name.replace("_", " ")
