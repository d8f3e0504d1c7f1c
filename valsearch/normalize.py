"""
File: normalize.py
Purpose: Turn val display names into space-separated words so the FTS
         tokenizer can match the individual parts of `fooBar`, `foo_bar`
         and `foo-bar`.
"""

import re

_CAMEL_RE = re.compile(r"[a-z0-9][A-Z]")
_SNAKE_RE = re.compile(r"\w_\w")
_KEBAB_RE = re.compile(r"\w-\w")

# Space before every uppercase letter except a leading one
_UPPER_RE = re.compile(r"(?<!^)(?=[A-Z])")


def normalize_name(name: str) -> str:
    """
    Return the searchable form of a display name, or "" when the name has no
    camelCase/snake_case/kebab-case structure.
    Only the first matching style is applied, in that order.
    """
    if not name:
        return ""
    if _CAMEL_RE.search(name):
        return _UPPER_RE.sub(" ", name)
    if _SNAKE_RE.search(name):
        return name.replace("_", " ")
    if _KEBAB_RE.search(name):
        return name.replace("-", " ")
    return ""
