"""Markdown configuration tables generated from annotated classes."""

from .frontend.annotations import arg, generate, register, rename_all

__all__ = ["arg", "generate", "register", "rename_all"]
