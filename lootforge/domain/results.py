"""Tagged result values returned at service boundaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar, Union

from .exceptions import EconomyError

T = TypeVar("T")
E = TypeVar("E", bound=EconomyError)


@dataclass(slots=True, frozen=True)
class Success(Generic[T]):
    value: T

    ok: ClassVar[bool] = True

    def unwrap(self) -> T:
        return self.value


@dataclass(slots=True, frozen=True)
class Failure(Generic[E]):
    error: E

    ok: ClassVar[bool] = False

    @property
    def kind(self) -> str:
        return self.error.kind

    def unwrap(self):
        raise self.error


Result = Union[Success[T], Failure[E]]
