"""Run logging for maintenance commands."""

from .logger import RunLogger

__all__ = ["RunLogger"]
