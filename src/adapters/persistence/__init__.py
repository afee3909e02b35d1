from .static_reference_repository import StaticReferenceRepository

__all__ = [
    "StaticReferenceRepository",
]
