# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/10/14 20:57:10
# @Author : Kariko Lin

"""
YINI document structure: typed values and nested sections.

Unlike C&C INIs every value here is typed on parse,
and a section may hold further sections (marked by `^`, `^^`, ...).
"""

from collections.abc import Mapping, MutableMapping, Sequence
from copy import deepcopy
from math import isfinite
from re import ASCII
from re import compile as regex
from types import MappingProxyType
from typing import Iterator
from warnings import warn

from .consts import (
    FALSE_DIGIT,
    FALSE_WORDS,
    TRUE_DIGIT,
    TRUE_WORDS,
    ValueKind,
    YiniMark
)

_INT_LITERAL = regex(r'[+-]?\d+', ASCII)
_REAL_LITERAL = regex(r'[+-]?(?:\d+\.\d*|\.\d+)(?:[eE][+-]?\d+)?', ASCII)


class YiniError(Exception):
    """Base of everything this package raises on purpose."""
    pass


class TypeCoercionError(YiniError, TypeError):
    """The stored value is unable to convert to the requested type."""
    pass


class NotFoundError(YiniError, KeyError):
    """Strict lookup of a property, or a section, that doesn't exist."""
    def __str__(self) -> str:
        # KeyError would repr() the message.
        return str(self.args[0]) if self.args else ''


class InvalidNameError(YiniError, ValueError):
    """A key or section name that would not read back the same once written."""
    pass


def parse_number(text: str) -> int | float | None:
    """Read a decimal int (or float, if there's a `.`) out of `text`.

    Returns `None` for anything malformed, instead of raising.
    """
    try:
        if '.' in text:
            return float(text) if _REAL_LITERAL.fullmatch(text) else None
        return int(text) if _INT_LITERAL.fullmatch(text) else None
    except ValueError:  # int_max_str_digits
        return None


def format_float(num: float) -> str:
    """`repr()` but always keeping a `.`, so it reads back as float."""
    ret = repr(num)
    if not isfinite(num) or '.' in ret:
        return ret
    mantissa, e, exponent = ret.partition('e')
    return f'{mantissa}.0{e}{exponent}'


# the line parser would split or cut a name holding any of these.
_NAME_BREAKERS = (
    '\n', '\r', YiniMark.LINE_COMMENT.value, YiniMark.BLOCK_OPEN.value)


def check_name(name: object, *, key: bool = False) -> str:
    """Make sure `name` reads back the same after being written.

    Keys additionally can't start with `^` (a header) or hold `=`.

    Raises:
        InvalidNameError: if not.
    """
    what = 'key' if key else 'section name'
    if not isinstance(name, str) or not name:
        raise InvalidNameError(f'YINI {what} should be a non-empty string.')
    if name != name.strip():
        raise InvalidNameError(
            f'YINI {what} {name!r} has surrounding whitespace.')
    for i in _NAME_BREAKERS:
        if i in name:
            raise InvalidNameError(f'YINI {what} {name!r} contains {i!r}.')
    if key and (name.startswith(YiniMark.SECTION.value)
                or YiniMark.ASSIGN.value in name):
        raise InvalidNameError(
            f'YINI key {name!r} starts with `^` or contains `=`.')
    return name


class Value:
    """Holds exactly one of `str`, `int`, `float`, `bool`
    or a `list` of `Value` (elements typed on their own).

    Note `bool` is checked before `int`, so `Value(True)` stays a bool.
    """
    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        data: 'Value | str | int | float | bool | Sequence' = ''
    ) -> None:
        self._data: str | int | float | bool | list[Value] = self.__wrap(data)

    @staticmethod
    def __wrap(data: object) -> 'str | int | float | bool | list[Value]':
        match data:
            case Value():
                return Value.__wrap(data._data)  # copy, never share arrays
            case bool() | float() | str():
                return data
            case int():
                return Value.__check_digits(data)
            case list() | tuple():
                return [Value(i) for i in data]
            case _:
                raise TypeCoercionError(
                    f'YINI value cannot hold {type(data).__name__}.')

    @staticmethod
    def __check_digits(num: int) -> int:
        # ints past `sys.get_int_max_str_digits()` can't be written out.
        try:
            str(num)
        except ValueError as e:
            raise TypeCoercionError(
                'YINI int has too many digits to write out.') from e
        return num

    @property
    def kind(self) -> ValueKind:
        match self._data:
            case bool():
                return ValueKind.BOOL
            case int():
                return ValueKind.INT
            case float():
                return ValueKind.FLOAT
            case str():
                return ValueKind.STRING
            case list():
                return ValueKind.ARRAY
        raise TypeCoercionError(f'unexpected payload {self._data!r}')

    @property
    def raw(self) -> str | int | float | bool | list:
        """Plain python payload, arrays unwrapped recursively."""
        if isinstance(self._data, list):
            return [i.raw for i in self._data]
        return self._data

    def is_string(self) -> bool:
        return self.kind is ValueKind.STRING

    def is_int(self) -> bool:
        return self.kind is ValueKind.INT

    def is_float(self) -> bool:
        return self.kind is ValueKind.FLOAT

    def is_bool(self) -> bool:
        return self.kind is ValueKind.BOOL

    def is_array(self) -> bool:
        return self.kind is ValueKind.ARRAY

    def as_string(self) -> str:
        match self._data:
            case bool(b):
                return 'true' if b else 'false'
            case str(s):
                return s
            case int(n):
                return str(n)
            case float(f):
                return format_float(f)
            case _:
                raise TypeCoercionError('Cannot convert array to string.')

    def as_int(self) -> int:
        match self._data:
            case bool():
                raise TypeCoercionError('Cannot convert bool to int.')
            case int(n):
                return n
            case float(f):
                return self.__truncate(f)
            case str(s):
                if (num := parse_number(s)) is None:
                    raise TypeCoercionError(
                        f'Cannot convert string "{s}" to int.')
                return num if isinstance(num, int) else self.__truncate(num)
            case _:
                raise TypeCoercionError('Cannot convert array to int.')

    @staticmethod
    def __truncate(num: float) -> int:
        try:
            return int(num)  # toward zero
        except (ValueError, OverflowError) as e:
            raise TypeCoercionError(f'Cannot convert {num} to int.') from e

    def as_float(self) -> float:
        match self._data:
            case bool():
                raise TypeCoercionError('Cannot convert bool to float.')
            case float(f):
                return f
            case int(n):
                return self.__widen(n)
            case str(s):
                if (num := parse_number(s)) is None:
                    raise TypeCoercionError(
                        f'Cannot convert string "{s}" to float.')
                return self.__widen(num)
            case _:
                raise TypeCoercionError('Cannot convert array to float.')

    @staticmethod
    def __widen(num: int | float) -> float:
        try:
            return float(num)
        except OverflowError as e:
            raise TypeCoercionError(f'{num} is out of float range.') from e

    def as_bool(self) -> bool:
        match self._data:
            case bool(b):
                return b
            case int(n):
                return n != 0
            case str(s):
                low = s.lower()
                if low in TRUE_WORDS or low == TRUE_DIGIT:
                    return True
                if low in FALSE_WORDS or low == FALSE_DIGIT:
                    return False
                raise TypeCoercionError(
                    f'Cannot convert string "{s}" to bool.')
            case float():
                raise TypeCoercionError('Cannot convert float to bool.')
            case _:
                raise TypeCoercionError('Cannot convert array to bool.')

    def as_array(self) -> list['Value']:
        if not isinstance(self._data, list):
            raise TypeCoercionError(
                f'Value is not an array, but {self.kind.value}.')
        return list(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.kind is other.kind and self._data == other._data

    def __repr__(self) -> str:
        return f'Value({self.raw!r})'


class Section(MutableMapping[str, Value]):
    """A node of YINI tree: key-value pairs, plus named child sections.

    Mapping operations go to the pairs. Note that `self[key]` is strict
    (`NotFoundError`) while `self.section(name)` creates a missing child,
    just like what the assignment `self[key] = val` does to pairs.

    Children are *owned*: `set_section()` stores a copy,
    so a section never hangs under two parents.
    """
    def __init__(self, pairs: Mapping[str, object] | None = None) -> None:
        self.__values: dict[str, Value] = {}
        self.__sections: dict[str, Section] = {}
        if pairs:
            self.update(pairs)

    # pairs (properties)

    def __getitem__(self, key: str) -> Value:
        if key not in self.__values:
            raise NotFoundError(f'Key not found: {key}')
        return self.__values[key]

    def __setitem__(self, key: str, value: object) -> None:
        check_name(key, key=True)
        if not isinstance(value, Value):
            value = Value(value)  # type: ignore[arg-type]
        self.__values[key] = value

    def __delitem__(self, key: str) -> None:
        if key not in self.__values:
            raise NotFoundError(f'Key not found: {key}')
        del self.__values[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__values

    def __len__(self) -> int:
        return len(self.__values)

    def __iter__(self) -> Iterator[str]:
        return iter(self.__values)

    @property
    def properties(self) -> Mapping[str, Value]:
        """Read-only view of the pairs."""
        return MappingProxyType(self.__values)

    def has_value(self, key: str) -> bool:
        return key in self.__values

    has_property = has_value

    # child sections

    @property
    def children(self) -> Mapping[str, 'Section']:
        """Read-only view of the child sections."""
        return MappingProxyType(self.__sections)

    def section(self, name: str) -> 'Section':
        """Get the child section, create an empty one if not exists."""
        if name not in self.__sections:
            check_name(name)
            self.__sections[name] = Section()
        return self.__sections[name]

    def get_section(self, name: str) -> 'Section':
        if name not in self.__sections:
            raise NotFoundError(f'Section not found: {name}')
        return self.__sections[name]

    def try_section(self, name: str) -> 'Section | None':
        """Like `get_section()`, but `None` if not found."""
        return self.__sections.get(name)

    def has_section(self, name: str) -> bool:
        return name in self.__sections

    def sections(self) -> Iterator[tuple[str, 'Section']]:
        return iter(self.__sections.items())

    def set_section(self, name: str, section: 'Section') -> None:
        check_name(name)
        # shouldn't keep ptr to external section.
        self.__sections[name] = deepcopy(section)

    def del_section(self, name: str) -> None:
        if name not in self.__sections:
            raise NotFoundError(f'Section not found: {name}')
        del self.__sections[name]

    def rename_section(self, old: str, new: str) -> bool:
        """Rename a child section, keeping its position.

        Returns:
            `True` if succeed, otherwise `False`.
            May not success if `old` is not found or `new` already exists.

        Raises:
            InvalidNameError: `new` would not read back the same.
        """
        check_name(new)
        if old not in self.__sections or new in self.__sections:
            return False
        self.__sections = {
            (new if k == old else k): v for k, v in self.__sections.items()
        }
        return True

    # whole tree

    def clear(self) -> None:
        self.__values.clear()
        self.__sections.clear()

    def merge(self, another: 'Section') -> None:
        """To merge `another` into self. Pairs of `another` win."""
        for k, v in another.items():
            self.__values[k] = Value(v)
        for name, sub in another.sections():
            self.section(name).merge(sub)

    def walk(
        self, _path: tuple[str, ...] = ()
    ) -> Iterator[tuple[tuple[str, ...], 'Section']]:
        """Depth first (pre-order) walk, yielding `(path, section)`.

        The section itself comes first with path `()`.
        """
        yield _path, self
        for name, sub in self.__sections.items():
            yield from sub.walk((*_path, name))

    def to_dict(self) -> dict[str, object]:
        """Convert to plain python data, child sections as nested dicts."""
        ret: dict[str, object] = {k: v.raw for k, v in self.__values.items()}
        for name, sub in self.__sections.items():
            if name in ret:
                warn(f'Section "{name}" shadows the key with the same name.')
            ret[name] = sub.to_dict()
        return ret

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> 'Section':
        """Reverse of `to_dict()`: mappings become sections,
        anything else should be a valid `Value` payload."""
        ret = cls()
        for k, v in data.items():
            if isinstance(v, Mapping):
                ret.__sections[check_name(str(k))] = cls.from_dict(v)
            else:
                ret[str(k)] = v
        return ret

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Section):
            return NotImplemented
        return (self.__values == other.__values
                and self.__sections == other.__sections)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return 'Section { .values = %d, .sections = %d }' % (
            len(self.__values), len(self.__sections))
