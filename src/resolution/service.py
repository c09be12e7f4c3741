"""End to end resolution pipeline.

parse -> resolve -> resolve widened -> reconcile versions -> fetch plan ->
copy -> report. Each stage consumes the value returned by the previous one;
all per-run state lives in the returned objects.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

try:
    from ..constants import Constants
    from ..common.logging_utils import Timer, extra_context, is_debug_enabled
except Exception:  # ImportError or relative depth issues when imported as "resolution..."
    from constants import Constants
    from common.logging_utils import Timer, extra_context, is_debug_enabled
from .copier import copy_artifacts, destination_name
from .fallback import FallbackResolver
from .models import (
    FallbackResult,
    LockGroupPattern,
    ReconcileResult,
    ResolutionPlan,
    ResolutionReport,
    ResolverResult,
)
from .reconcile import VersionLockReconciler
from .report import ResolutionReporter
from .resolvers.base import RepositoryResolver

logger = logging.getLogger(__name__)

Copier = Callable[[Iterable[Path], Union[str, Path]], List[str]]


@dataclass(frozen=True)
class PipelineOutcome:
    """Everything a single run produced."""
    report: ResolutionReport
    plan: ResolutionPlan
    packages_to_copy: Dict[str, str] = field(default_factory=dict)
    fetched: ResolverResult = field(default_factory=ResolverResult)


class ResolutionPipeline:
    """Run the resolution stages against a repository resolver."""

    def __init__(
        self,
        resolver: RepositoryResolver,
        lock_groups: Optional[Sequence[LockGroupPattern]] = None,
        copier: Copier = copy_artifacts,
        fallback_type: str = Constants.FALLBACK_TYPE,
    ):
        self.resolver = resolver
        self.fallback = FallbackResolver(resolver, fallback_type)
        self.reconciler = VersionLockReconciler(lock_groups)
        self.reporter = ResolutionReporter()
        self.copier = copier

    def plan(self, packages: Iterable[str]) -> Tuple[FallbackResult, ReconcileResult]:
        """Resolve the packages and reconcile locked versions without fetching."""
        searched = self.fallback.resolve(packages)
        reconciled = self.reconciler.reconcile(searched.final_pass.resolved_artifacts)
        return searched, reconciled

    def run(
        self,
        packages: Iterable[str],
        target_dir: Optional[Union[str, Path]] = None,
        dry_run: bool = False,
    ) -> PipelineOutcome:
        """Resolve, copy and report.

        With ``dry_run`` nothing is written; the report lists the names that
        would have been copied.
        """
        if not dry_run and target_dir is None:
            raise ValueError("target_dir is required unless dry_run is set")
        with Timer() as timer:
            searched, reconciled = self.plan(packages)
            fetched = self.resolver.resolve(reconciled.plan.keys())
            files = sorted(fetched.resolved_files, key=str)
            if dry_run:
                copied = [destination_name(os.path.basename(str(f))) for f in files]
            else:
                copied = self.copier(files, target_dir)
            report = self.reporter.build(searched.packages_to_copy, copied, reconciled.modifications)
        if is_debug_enabled(logger):
            logger.debug("Pipeline finished", extra=extra_context(
                event="function_exit", component="pipeline", action="run",
                outcome="dry_run" if dry_run else "copied", duration_ms=timer.duration_ms()
            ))
        logger.info("%d artifact(s) copied, %d missing, %d modified",
                    len(report.copied), len(report.missing), len(report.modified))
        return PipelineOutcome(
            report=report,
            plan=reconciled.plan,
            packages_to_copy=dict(searched.packages_to_copy),
            fetched=fetched,
        )
