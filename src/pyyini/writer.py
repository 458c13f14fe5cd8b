# -*- encoding: utf-8 -*-
# @File   : writer.py
# @Time   : 2024/10/15 23:10:12
# @Author : Kariko Lin

from .consts import DEFAULT_INDENT, RENDER_QUOTE, ValueKind, YiniMark
from .model import Section, Value


def render_literal(value: Value) -> str:
    """Value -> YINI literal, in canonical form.

    Strings are always single quoted, without escaping,
    so a `'` inside would not read back.
    """
    match value.kind:
        case ValueKind.STRING:
            return f'{RENDER_QUOTE}{value.as_string()}{RENDER_QUOTE}'
        case ValueKind.ARRAY:
            return '[%s]' % ', '.join(
                render_literal(i) for i in value.as_array())
        case _:
            # floats always keep a `.`, see `format_float()`.
            return value.as_string()


def serialize(
    document: Section, *,
    indent: int = DEFAULT_INDENT, blank_lines: int = 1
) -> str:
    """Dump a YINI tree to text, depth first.

    ```yini
    key = 'root pairs first'

    ^ section
        key = 1

        ^^ subsection
            key = 2.0
    ```

    Sections come in their insertion order. `blank_lines` empty lines
    go before every header, except a header on the very first line.
    """
    lines: list[str] = []
    for path, sect in document.walk():
        depth = len(path)
        if depth > 0:
            if lines:
                lines.extend([''] * blank_lines)
            lines.append(
                ' ' * (indent * (depth - 1))
                + YiniMark.SECTION.value * depth
                + f' {path[-1]}')
        prefix = ' ' * (indent * depth)
        for k, v in sect.items():
            lines.append(
                f'{prefix}{k} {YiniMark.ASSIGN.value} {render_literal(v)}')
    return ''.join(f'{i}\n' for i in lines)
