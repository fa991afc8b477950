"""TaskFlow: habit streaks and a day-by-day calendar over tasks and habits."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestConfig

__all__ = ["BaseConfig", "DevConfig", "TestConfig"]
