"""aarfetch - copy Maven artifacts with version locked package families

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

# Modules import both in source/test mode (via src.*) and as an installed
# console script (top level modules).
try:
    from src.args import build_parser, parse_args
    from src.cli_config import RunSettings, build_settings, load_config_file
    from src.common.logging_utils import configure_logging, extra_context, is_debug_enabled
    from src.constants import ExitCodes
    from src.resolution.errors import ResolutionError
    from src.resolution.lock_groups import load_lock_groups
    from src.resolution.models import ResolutionReport
    from src.resolution.report import format_report, report_to_dict
    from src.resolution.resolvers.maven import MavenRepositoryResolver
    from src.resolution.resolvers.repositories import default_repositories
    from src.resolution.service import PipelineOutcome, ResolutionPipeline
except ImportError:  # Fall back when 'src' package is not available
    from args import build_parser, parse_args
    from cli_config import RunSettings, build_settings, load_config_file
    from common.logging_utils import configure_logging, extra_context, is_debug_enabled
    from constants import ExitCodes
    from resolution.errors import ResolutionError
    from resolution.lock_groups import load_lock_groups
    from resolution.models import ResolutionReport
    from resolution.report import format_report, report_to_dict
    from resolution.resolvers.maven import MavenRepositoryResolver
    from resolution.resolvers.repositories import default_repositories
    from resolution.service import PipelineOutcome, ResolutionPipeline

logger = logging.getLogger(__name__)


def load_pkgs_file(file_name):
    """Loads package specifiers from a file.

    Blank lines and lines starting with '#' are skipped.

    Args:
        file_name (str): File path containing the list of packages.

    Returns:
        list: List of package specifiers
    """
    try:
        with open(file_name, encoding='utf-8') as file:
            return [line.strip() for line in file
                    if line.strip() and not line.strip().startswith("#")]
    except FileNotFoundError as e:
        logging.error("File not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except IOError as e:
        logging.error("IO error: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def export_json(report: ResolutionReport, path):
    """Exports the resolution report to a JSON file.

    Args:
        report (ResolutionReport): Report produced by the pipeline.
        path (str): File path to export the JSON.
    """
    try:
        with open(path, 'w', encoding='utf-8') as file:
            json.dump(report_to_dict(report), file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def _setup_logging(args) -> None:
    """Configure console logging and the optional log file."""
    configure_logging(getattr(args, "LOG_LEVEL", None))
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def _validate(settings: RunSettings, dry_run: bool) -> None:
    """Print usage and exit when required inputs are absent."""
    problem = None
    if not settings.packages:
        problem = "No packages specified (use --package, --packages, --load_list or PACKAGES_TO_COPY)."
    elif not settings.target_dir and not dry_run:
        problem = "Target directory must be specified (use --target-dir or TARGET_DIR)."
    if problem:
        build_parser().print_help(sys.stderr)
        logging.error(problem)
        sys.exit(ExitCodes.FILE_ERROR.value)


def run(settings: RunSettings, dry_run: bool = False) -> PipelineOutcome:
    """Build the resolver and pipeline for ``settings`` and execute one run.

    Raises:
        ResolutionError: on configuration problems (bad lock group, bad
            repository URI, unsupported version scheme)
    """
    lock_groups = load_lock_groups(settings.lock_groups)
    repositories = default_repositories(
        settings.repositories,
        android_home=settings.android_home,
        include_maven_local=settings.include_maven_local,
    )
    if is_debug_enabled(logger):
        logger.debug("Repositories: %s", ", ".join(r.url for r in repositories), extra=extra_context(
            event="config", component="cli", action="repositories", outcome="loaded"
        ))
    with MavenRepositoryResolver(repositories) as resolver:
        pipeline = ResolutionPipeline(resolver, lock_groups, fallback_type=settings.fallback_type)
        return pipeline.run(settings.packages, settings.target_dir, dry_run=dry_run)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    packages_from_files = []
    for path in getattr(args, "LIST_FROM_FILE", None) or []:
        packages_from_files.extend(load_pkgs_file(path))
    settings = build_settings(args, packages_from_files, config=load_config_file(args.CONFIG))
    _validate(settings, args.DRY_RUN)
    logging.info("Package list imported: %s", ", ".join(settings.packages))

    try:
        outcome = run(settings, dry_run=args.DRY_RUN)
    except ResolutionError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.CONFIG_ERROR.value)
    except OSError as e:
        logging.error("Unable to copy artifacts to %s: %s", settings.target_dir, e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    if not args.QUIET:
        text = format_report(outcome.report)
        if text:
            print(text)

    if getattr(args, "OUTPUT", None):
        export_json(outcome.report, os.path.abspath(args.OUTPUT))

    if outcome.report.has_missing:
        logging.warning("One or more packages could not be found.")
        if args.ERROR_ON_MISSING:
            logging.error("Missing packages present, exiting with non-zero status code.")
            sys.exit(ExitCodes.EXIT_WARNINGS.value)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
