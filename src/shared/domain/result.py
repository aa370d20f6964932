"""
Result Monad for Domain Operations
Represents a rule outcome (success or typed failure) without exceptions
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Success(Generic[T]):
    """
    Successful outcome.
    
    Attributes:
        value: The successful result value (None for pure validations)
    """
    
    value: T = None  # type: ignore[assignment]
    
    def is_success(self) -> bool:
        return True
    
    def is_failure(self) -> bool:
        return False
    
    def map(self, func: Callable[[T], Any]) -> "Success[Any]":
        """Transform the success value."""
        return Success(func(self.value))
    
    def flat_map(self, func: Callable[[T], "Result[Any, Any]"]) -> "Result[Any, Any]":
        """Chain another operation that returns a Result."""
        return func(self.value)
    
    def or_else(self, default: T) -> T:
        return self.value
    
    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure(Generic[E]):
    """
    Failed outcome carrying a typed error (e.g. a RuleViolation).
    
    Attributes:
        error: The error describing which rule fired
    """
    
    error: E
    
    def is_success(self) -> bool:
        return False
    
    def is_failure(self) -> bool:
        return True
    
    def map(self, func: Callable[[Any], Any]) -> "Failure[E]":
        """Failures propagate unchanged."""
        return self
    
    def flat_map(self, func: Callable[[Any], Any]) -> "Failure[E]":
        """Failures propagate unchanged."""
        return self
    
    def or_else(self, default: Any) -> Any:
        return default
    
    def unwrap(self) -> Any:
        """
        Raises:
            ValueError: Always; a Failure has no value
        """
        raise ValueError(f"Attempted to unwrap a Failure: {self.error}")


Result = Union[Success[T], Failure[E]]
