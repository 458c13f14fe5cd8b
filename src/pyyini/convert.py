# -*- encoding: utf-8 -*-
# @File   : convert.py
# @Time   : 2024/10/16 21:15:59
# @Author : Kariko Lin

"""Convert YINI trees to (and from) JSON or YAML documents.

Child sections become nested objects, and pairs become plain values,
so there is no way to tell an empty section from an empty object value.
But YINI values are never objects, that's fine.
"""

import json
from typing import TypedDict

import yaml

from .abstract import FileHandler
from .model import Section, YiniError
from .parser import FileError

PROTOCOL = 1


class _YiniJson(TypedDict, total=False):
    protocol: int
    data: dict[str, object]


class YiniJsonParser(FileHandler[Section]):
    JSON_TEMPLATE = _YiniJson({"protocol": PROTOCOL})

    def __init__(self, filename: str, encoding: str = 'utf-8') -> None:
        super().__init__(filename)
        self._codec = encoding

    def read(self) -> Section:
        """Read either a wrapped document (`protocol` + `data`),
        or a bare JSON object as the tree itself."""
        try:
            with open(self._fn, 'r', encoding=self._codec) as fp:
                src = json.load(fp)
        except OSError as e:
            raise FileError(f'Cannot open file: {self._fn}') from e
        except ValueError as e:  # JSONDecodeError, UnicodeDecodeError
            raise YiniError(f'`{self._fn}` is not valid JSON: {e}') from e
        if not isinstance(src, dict):
            raise YiniError(f'`{self._fn}` is not a JSON object.')
        if 'protocol' in src and isinstance(src.get('data'), dict):
            src = src['data']
        return Section.from_dict(src)

    def write(self, instance: Section, indent: int = 2) -> None:
        ret = self.JSON_TEMPLATE.copy()
        ret['data'] = instance.to_dict()
        try:
            with open(self._fn, 'w', encoding=self._codec) as fp:
                json.dump(ret, fp, ensure_ascii=False, indent=indent)
        except OSError as e:
            raise FileError(f'Cannot write to file: {self._fn}') from e


class YiniYamlParser(FileHandler[Section]):
    YAML_HEADER = f'# pyyini yaml, protocol {PROTOCOL}\n'

    def __init__(self, filename: str, encoding: str = 'utf-8') -> None:
        super().__init__(filename)
        self._codec = encoding

    def read(self) -> Section:
        try:
            with open(self._fn, 'r', encoding=self._codec) as fp:
                src = yaml.safe_load(fp)
        except OSError as e:
            raise FileError(f'Cannot open file: {self._fn}') from e
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise YiniError(f'`{self._fn}` is not valid YAML: {e}') from e
        if src is None:  # empty document
            return Section()
        if not isinstance(src, dict):
            raise YiniError(f'`{self._fn}` is not a YAML mapping.')
        return Section.from_dict(src)

    def write(self, instance: Section, indent: int = 2) -> None:
        try:
            with open(self._fn, 'w', encoding=self._codec) as fp:
                fp.write(self.YAML_HEADER)
                yaml.safe_dump(
                    instance.to_dict(), fp,
                    allow_unicode=True, sort_keys=False, indent=indent)
        except OSError as e:
            raise FileError(f'Cannot write to file: {self._fn}') from e
