"""Shared configuration for etupedia."""

from .config import Config

__all__ = ["Config"]
