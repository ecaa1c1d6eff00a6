"""Shared utilities."""

from docpager.utils.memo import AsyncOnce

__all__ = ["AsyncOnce"]
