"""
Errors

Exceptions raised while building or querying a skeleton.
"""


class SkeletonError(Exception):
    """Base class for every error raised by the skeleton runtime."""


class DocumentError(SkeletonError, ValueError):
    """
    The skeleton document cannot be turned into a Skeleton.

    Raised at construction time for missing or mistyped fields, unresolved
    references (parent bone, slot, skin slot) and unknown constructs
    (attachment type, curve kind).
    """

    def __init__(self, message: str, path: str = ""):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class NotFound(SkeletonError, LookupError):
    """A skin or animation name is not part of the skeleton."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"Cannot find {kind} '{name}'")

    def __str__(self):
        return self.args[0]


class AtlasError(DocumentError):
    """Malformed texture atlas description."""
