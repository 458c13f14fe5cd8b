# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2024/10/14 20:31:06
# @Author : Kariko Lin

from enum import Enum


class YiniMark(str, Enum):
    SECTION = '^'
    ASSIGN = '='
    LINE_COMMENT = '//'
    BLOCK_OPEN = '/*'
    BLOCK_CLOSE = '*/'
    ARRAY_OPEN = '['
    ARRAY_CLOSE = ']'
    ARRAY_SEP = ','


class ValueKind(str, Enum):
    STRING = 'string'
    INT = 'int'
    FLOAT = 'float'
    BOOL = 'bool'
    ARRAY = 'array'


QUOTES = ("'", '"')
# the writer always quotes with this one.
RENDER_QUOTE = "'"

TRUE_WORDS = frozenset({'true', 'yes', 'on'})
FALSE_WORDS = frozenset({'false', 'no', 'off'})
# only text coercion accepts these, literals `1`/`0` still parse as int.
TRUE_DIGIT = '1'
FALSE_DIGIT = '0'

DEFAULT_INDENT = 4
