"""Custom Jinja2 filters for generated source files."""

import re

_WORD_BOUNDARY = re.compile(r"[^A-Za-z0-9]+|(?<=[a-z0-9])(?=[A-Z])")


def _words(name: str) -> list[str]:
    return [w for w in _WORD_BOUNDARY.split(name) if w]


def pascal_case(name: str) -> str:
    """Example: "user-profile" -> "UserProfile" """
    return "".join(w[:1].upper() + w[1:] for w in _words(name))


def camel_case(name: str) -> str:
    """Example: "UserProfile" -> "userProfile" """
    pascal = pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def kebab_case(name: str) -> str:
    """Example: "getUserData" -> "get-user-data" """
    return "-".join(w.lower() for w in _words(name))


def js_string(value: str) -> str:
    """Quote a value as a double-quoted JavaScript string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


CUSTOM_FILTERS = {
    "pascal_case": pascal_case,
    "camel_case": camel_case,
    "kebab_case": kebab_case,
    "js_string": js_string,
}
