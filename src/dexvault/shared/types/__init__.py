"""Base types for DexVault models."""

from .base import BaseDataclass

__all__ = ["BaseDataclass"]
