"""Concrete repository implementations."""

from .memory import InMemoryTaskRepository
from .task import SQLModelTaskRepository

__all__ = [
    "InMemoryTaskRepository",
    "SQLModelTaskRepository",
]
