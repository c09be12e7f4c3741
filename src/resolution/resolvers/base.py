"""Abstract repository resolver."""

from abc import ABC, abstractmethod
from typing import Iterable

from ..models import ResolverResult


class RepositoryResolver(ABC):
    """Capability that turns package specifiers into concrete artifacts.

    Implementations are lenient: a specifier that cannot be resolved is left
    out of the result instead of raising.
    """

    @abstractmethod
    def resolve(self, specifiers: Iterable[str]) -> ResolverResult:
        """Resolve every specifier that can be found.

        Args:
            specifiers: ``group:artifact[:version][@type]`` strings

        Returns:
            Files and artifacts for the specifiers that were located
        """
