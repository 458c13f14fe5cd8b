# -*- encoding: utf-8 -*-
# @File   : abstract.py
# @Time   : 2024/10/14 20:22:30
# @Author : Kariko Lin

from abc import ABCMeta, abstractmethod
from typing import Generic, TypeVar

T = TypeVar('T')


class FileHandler(Generic[T], metaclass=ABCMeta):
    """Anything bound to a named file, reading `T` out and writing `T` back."""
    def __init__(self, filename: str) -> None:
        self._fn = filename

    @abstractmethod
    def read(self) -> T:
        raise NotImplementedError

    @abstractmethod
    def write(self, instance: T) -> None:
        raise NotImplementedError

    def __str__(self) -> str:
        return self._fn
