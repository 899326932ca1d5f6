"""Path string handling.

Path tokens look like ``/interfaces/interface[name=eth0]/state/counters``.
A ``/`` separates elements except inside ``[...]``, and a backslash escapes
the character after it. Elements are parsed into a name plus key/value
pairs.

Examples:
    split_path("/a/b[k=v/w]/c")    -> ["a", "b[k=v/w]", "c"]
    parse_element("b[k=v/w]")      -> PathElem(name="b", key={"k": "v/w"})
    str_path(Path(element=["a", "b"])) -> "a/b"
"""
from typing import Optional

from .errors import PathParseError
from .messages import Path, PathElem


def _next_token_index(path: str) -> int:
    """Index of the next element separator, or len(path)."""
    in_brackets = False
    escape = False
    for i, c in enumerate(path):
        if escape:
            escape = False
            continue
        if c == "\\":
            escape = True
        elif c == "[":
            in_brackets = True
        elif c == "]":
            in_brackets = False
        elif c == "/" and not in_brackets:
            return i
    return len(path)


def split_path(path: str) -> list[str]:
    """Split a path string into its elements.

    A leading slash is optional and "/" alone yields no elements.
    """
    result = []
    if path.startswith("/"):
        path = path[1:]
    while path:
        i = _next_token_index(path)
        result.append(path[:i])
        path = path[i + 1:]
    return result


def split_paths(paths: list[str]) -> list[list[str]]:
    """Split each path string in turn."""
    return [split_path(p) for p in paths]


def _read_until(text: str, start: int, stop: str) -> tuple[str, int]:
    """Read unescaped text from start up to the first unescaped stop char.

    Returns the unescaped text and the index of the stop char, or -1 when
    the stop char never appears.
    """
    out = []
    i = start
    while i < len(text):
        c = text[i]
        if c == "\\" and i + 1 < len(text):
            out.append(text[i + 1])
            i += 2
            continue
        if c in stop:
            return "".join(out), i
        out.append(c)
        i += 1
    return "".join(out), -1


def parse_element(element: str) -> PathElem:
    """Parse ``name[key=value]...`` into a PathElem.

    Raises:
        PathParseError: empty name, missing ``=`` or ``]``, empty or
            duplicate key, or text after a closing bracket.
    """
    name, i = _read_until(element, 0, "[")
    if not name:
        raise PathParseError(element, "failed to find element name")
    if i == -1:
        return PathElem(name=name)

    keys: dict[str, str] = {}
    while i < len(element):
        if element[i] != "[":
            raise PathParseError(element, f"unexpected {element[i]!r} after key")
        key, eq = _read_until(element, i + 1, "=]")
        if eq == -1 or element[eq] != "=":
            raise PathParseError(element, "failed to find '=' in key")
        if not key:
            raise PathParseError(element, "failed to find key name")
        value, end = _read_until(element, eq + 1, "]")
        if end == -1:
            raise PathParseError(element, "failed to find ']'")
        if key in keys:
            raise PathParseError(element, f"duplicate key {key!r}")
        keys[key] = value
        i = end + 1

    return PathElem(name=name, key=keys)


def parse_elements(elements: list[str]) -> list[PathElem]:
    """Parse every element of a split path."""
    return [parse_element(e) for e in elements]


def _escape(text: str, special: str) -> str:
    for c in "\\" + special:
        text = text.replace(c, "\\" + c)
    return text


def _str_elem(elem: PathElem) -> str:
    parts = [_escape(elem.name, "/[")]
    for k in sorted(elem.key):
        parts.append(f"[{_escape(k, '=]')}={_escape(elem.key[k], ']')}]")
    return "".join(parts)


def str_path(path: Optional[Path]) -> str:
    """Render a path as slash-joined text.

    Structured elements win over the legacy flat list; an empty or missing
    path renders as "/".
    """
    if path is None:
        return "/"
    if path.elem:
        return "/".join(_str_elem(e) for e in path.elem)
    if path.element:
        return "/".join(path.element)
    return "/"
