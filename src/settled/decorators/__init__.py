"""Decorators that make a function return Outcomes instead of raising."""

from settled.decorators.captured import captured, captured_sync

__all__ = ['captured', 'captured_sync']
