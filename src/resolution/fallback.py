"""Two-pass search that retries unresolved packages with a fallback type.

Package metadata rarely declares the fallback artifact type, so the first
pass always uses the specifiers exactly as requested. Only packages whose
artifact did not show up in the first pass and which carry no explicit type
are widened with ``@<fallback_type>`` for the final pass.
"""

import logging
from typing import Dict, Iterable

try:
    from ..constants import Constants
    from ..common.logging_utils import extra_context, is_debug_enabled
except Exception:  # ImportError or relative depth issues when imported as "resolution..."
    from constants import Constants
    from common.logging_utils import extra_context, is_debug_enabled
from . import coordinates
from .models import FallbackResult
from .resolvers.base import RepositoryResolver

logger = logging.getLogger(__name__)


class FallbackResolver:
    """Resolve a package list, widening misses with an alternate artifact type."""

    def __init__(self, resolver: RepositoryResolver, fallback_type: str = Constants.FALLBACK_TYPE):
        self._resolver = resolver
        self.fallback_type = fallback_type

    def widen(self, packages: Iterable[str], resolved_names: Iterable[str]) -> Dict[str, str]:
        """Map the specifier for the final pass to the original specifier.

        Incomplete specifiers are dropped; they cannot be matched against
        resolved files.
        """
        resolved = set(resolved_names)
        packages_to_copy: Dict[str, str] = {}
        for spec, artifact in coordinates.versionless_artifacts_by_package(packages).items():
            final_spec = spec
            if artifact not in resolved and not coordinates.has_explicit_type(spec):
                final_spec = coordinates.with_type(spec, self.fallback_type)
                if is_debug_enabled(logger):
                    logger.debug("Retrying %s as %s", spec, final_spec, extra=extra_context(
                        event="fallback", component="fallback_resolver", action="widen",
                        target=spec, outcome="widened"
                    ))
            packages_to_copy[final_spec] = spec
        return packages_to_copy

    def resolve(self, packages: Iterable[str]) -> FallbackResult:
        requested = list(dict.fromkeys(packages))
        first_pass = self._resolver.resolve(requested)
        resolved_names = coordinates.versionless_names(first_pass.resolved_files)
        packages_to_copy = self.widen(requested, resolved_names)
        widened = sum(1 for k, v in packages_to_copy.items() if k != v)
        if widened:
            logger.info("Searching for %d package(s) as @%s artifacts", widened, self.fallback_type)
        final_pass = self._resolver.resolve(list(packages_to_copy))
        return FallbackResult(
            packages_to_copy=packages_to_copy,
            first_pass=first_pass,
            final_pass=final_pass,
        )
