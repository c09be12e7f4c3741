"""Classification of requested packages after artifacts were copied."""

import os
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from . import coordinates
from .models import ModificationRecord, ResolutionReport


class ResolutionReporter:  # pylint: disable=too-few-public-methods
    """Compare the requested packages against the files actually written."""

    def build(
        self,
        packages_to_copy: Mapping[str, str],
        copied_files: Sequence[str],
        modifications: Iterable[ModificationRecord] = (),
    ) -> ResolutionReport:
        """Classify every requested package.

        Args:
            packages_to_copy: final specifier -> originally requested specifier
            copied_files: destination names written by the copy step, after
                ``.srcaar`` was renamed to ``.aar``
            modifications: version overrides from the reconciler

        Returns:
            ResolutionReport with copied file names, missing original
            specifiers and modifications, in that order.
        """
        names = [os.path.basename(str(f)) for f in copied_files]
        resolved = coordinates.versionless_names(names)
        missing: List[str] = []
        for spec, artifact in coordinates.versionless_artifacts_by_package(packages_to_copy).items():
            if artifact not in resolved:
                missing.append(packages_to_copy[spec])
        return ResolutionReport(
            copied=tuple(names),
            missing=tuple(missing),
            modified=tuple(modifications),
        )


def format_report(report: ResolutionReport) -> str:
    """Render the copied, missing and modified sections; empty ones are omitted."""
    lines: List[str] = []
    sections = (
        ("Copied artifacts:", list(report.copied)),
        ("Missing artifacts:", list(report.missing)),
        ("Modified artifacts:", [str(m) for m in report.modified]),
    )
    for title, items in sections:
        if not items:
            continue
        lines.append(title)
        lines.extend(items)
        lines.append("")
    return "\n".join(lines)


def report_to_dict(report: ResolutionReport) -> Dict[str, Any]:
    return {
        "copied": list(report.copied),
        "missing": list(report.missing),
        "modified": [
            {
                "original": m.original,
                "modified": m.modified,
                "original_version": m.original_version,
                "new_version": m.new_version,
            }
            for m in report.modified
        ],
    }
