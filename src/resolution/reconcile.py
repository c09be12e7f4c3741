"""Version lock reconciliation.

Resolved artifacts are split into lock families and independent artifacts.
Independent artifacts go into the plan untouched; every member of a family
is rewritten to the highest version found in that family.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

try:
    from ..common.logging_utils import extra_context, is_debug_enabled
except Exception:  # ImportError or relative depth issues when imported as "resolution..."
    from common.logging_utils import extra_context, is_debug_enabled
from .lock_groups import load_lock_groups, owner_index
from .models import LockGroupPattern, ModificationRecord, ReconcileResult, ResolutionPlan, ResolvedArtifact
from .versions import sort_versions

logger = logging.getLogger(__name__)


class VersionLockReconciler:
    """Force lock families onto a single version."""

    def __init__(self, lock_groups: Optional[Sequence[LockGroupPattern]] = None):
        self.lock_groups: List[LockGroupPattern] = (
            list(lock_groups) if lock_groups is not None else load_lock_groups()
        )

    def reconcile(self, artifacts: Iterable[ResolvedArtifact]) -> ReconcileResult:
        """Build the final plan.

        Raises:
            UnsupportedVersionError: if a family member has a non-numeric version
        """
        plan = ResolutionPlan()
        modifications: List[ModificationRecord] = []
        ordered = sorted(set(artifacts), key=lambda a: a.coordinate())
        owners: Dict[ResolvedArtifact, Optional[int]] = {
            a: owner_index(a.group_artifact, self.lock_groups) for a in ordered
        }

        for artifact in ordered:
            if owners[artifact] is None:
                plan.add(artifact.coordinate())

        for index, group in enumerate(self.lock_groups):
            candidates = [a for a in ordered if owners[a] == index]
            if not candidates:
                continue
            elected = sort_versions({a.version for a in candidates})[-1]
            for artifact in candidates:
                rewritten = artifact.coordinate(elected)
                plan.add(rewritten)
                if artifact.version != elected:
                    modifications.append(ModificationRecord(artifact.coordinate(), rewritten))
            if is_debug_enabled(logger):
                logger.debug("Locked %d artifact(s) of %s to %s", len(candidates), group.name, elected,
                             extra=extra_context(event="version_lock", component="reconciler",
                                                 action="reconcile", target=group.name, outcome="locked"))

        if modifications:
            logger.info("Version locking changed %d artifact(s)", len(modifications))
        return ReconcileResult(plan=plan, modifications=tuple(modifications))
