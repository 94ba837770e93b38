from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")
ID = TypeVar("ID")


class Repository(ABC, Generic[T, ID]):
    """Minimal persistence contract shared by the repositories."""

    @abstractmethod
    async def get(self, id: ID) -> T | None:
        ...

    @abstractmethod
    async def create(self, entity: T) -> T:
        ...
