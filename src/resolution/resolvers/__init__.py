"""Repository resolvers consumed by the resolution pipeline."""

from .base import RepositoryResolver
from .memory import InMemoryResolver
from .maven import MavenRepositoryResolver

__all__ = [
    "RepositoryResolver",
    "InMemoryResolver",
    "MavenRepositoryResolver",
]
