# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/10/14 20:01:52
# @Author : Kariko Lin

import logging

from .consts import ValueKind
from .convert import YiniJsonParser, YiniYamlParser
from .model import (
    InvalidNameError,
    NotFoundError,
    Section,
    TypeCoercionError,
    Value,
    YiniError
)
from .parser import (
    FileError,
    FormatError,
    YiniParser,
    parse,
    parse_literal,
    strip_comments
)
from .writer import render_literal, serialize

__all__ = [
    'Value', 'ValueKind', 'Section',
    'YiniParser', 'YiniJsonParser', 'YiniYamlParser',
    'parse', 'parse_literal', 'strip_comments', 'serialize', 'render_literal',
    'YiniError', 'FormatError', 'FileError',
    'TypeCoercionError', 'NotFoundError', 'InvalidNameError'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
