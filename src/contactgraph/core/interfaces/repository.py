"""Abstract base class for graph repositories following the Repository Pattern."""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """
    Generic repository interface for storing graphs under string identifiers.

    Identifiers are chosen by the caller on create, e.g. ``"1abc_A_Ca_8.0"``.
    """

    @abstractmethod
    def get(self, id: str) -> Optional[T]:
        """Retrieve an entity by ID, None if absent."""
        pass

    @abstractmethod
    def list(self) -> List[str]:
        """List the IDs of all stored entities, sorted."""
        pass

    @abstractmethod
    def create(self, id: str, entity: T) -> T:
        """Store a new entity; fails if the ID is taken."""
        pass

    @abstractmethod
    def update(self, id: str, entity: T) -> T:
        """Replace an existing entity."""
        pass

    @abstractmethod
    def delete(self, id: str) -> None:
        """Delete an entity by ID."""
        pass
