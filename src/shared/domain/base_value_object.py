"""
Base Value Object Contract for Domain Layer
Immutable objects compared by their equality components
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseValueObject(ABC):
    """
    Abstract base class for all value objects.
    
    Value objects are immutable and have no identity. Equality and hashing
    are driven by `_get_equality_components()`, so two permissions built
    from "Tickets:View" and "tickets:view" are the same value.
    
    Subclasses assign their attributes in __init__ and then call
    `_finalize_init()` to freeze the instance.
    """
    
    @abstractmethod
    def _get_equality_components(self) -> tuple:
        """Return the tuple of attributes that defines this value."""
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self._get_equality_components() == other._get_equality_components()
    
    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self._get_equality_components()))
    
    def __repr__(self) -> str:
        components = ", ".join(repr(c) for c in self._get_equality_components())
        return f"{self.__class__.__name__}({components})"
    
    def __setattr__(self, name: str, value: Any) -> None:
        """
        Prevent modification after initialization.
        
        Raises:
            AttributeError: If attempting to modify after __init__
        """
        if getattr(self, "_initialized", False):
            raise AttributeError(
                f"Cannot modify immutable value object {self.__class__.__name__}"
            )
        super().__setattr__(name, value)
    
    def _finalize_init(self) -> None:
        """Call this at the end of __init__ in subclasses to freeze object."""
        super().__setattr__("_initialized", True)
