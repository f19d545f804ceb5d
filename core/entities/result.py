from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from core.entities.errors import AppError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: AppError


Result = Union[Ok[T], Err]
