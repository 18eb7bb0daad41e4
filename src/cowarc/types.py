"""Core type definitions for cowarc."""

type Copy[T] = T
"""Type alias indicating a value is a private copy detached from shared storage.

When you see `Copy[T]` in a return type, the returned value is a fresh copy.
Mutating it does NOT affect any container. To store it, write it back via
`container.set_val(value)`.
"""
