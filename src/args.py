"""Argument parsing functionality for aarfetch."""

import argparse

HELP_EPILOG = """
Packages, repositories and the target directory may also be supplied through
the PACKAGES_TO_COPY, MAVEN_REPOS and TARGET_DIR environment variables
(semicolon separated lists), or through a YAML/JSON config file. ANDROID_HOME
adds the Android SDK local Maven repositories to the search path.

Example:
  aarfetch -t libs \\
    --packages "com.android.support:support-compat:26.0.1;com.android.support:support-core-utils:26.0.1"
"""


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="aarfetch",
        description=(
            "aarfetch - Copy Maven artifacts into a directory, locking "
            "related package families to a single version"
        ),
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=True,
    )

    parser.add_argument("-p", "--package",
                        dest="PACKAGES",
                        help="Package specifier group:artifact[:version][@type] (repeatable)",
                        action="append", type=str,
                        default=[])
    parser.add_argument("--packages",
                        dest="PACKAGE_LIST",
                        help="Semicolon separated list of package specifiers",
                        action="store", type=str)
    parser.add_argument("-l", "--load_list",
                        dest="LIST_FROM_FILE",
                        help="Load package specifiers from a file, one per line",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-r", "--repo",
                        dest="REPOS",
                        help="Maven repository URI or directory searched before the defaults (repeatable)",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-t", "--target-dir",
                        dest="TARGET_DIR",
                        help="Directory to copy artifacts to",
                        action="store", type=str)
    parser.add_argument("--android-home",
                        dest="ANDROID_HOME",
                        help="Android SDK install location",
                        action="store", type=str)
    parser.add_argument("--no-maven-local",
                        dest="NO_MAVEN_LOCAL",
                        help="Do not search the local Maven cache (~/.m2/repository)",
                        action="store_true")
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store", type=str)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Write the resolution report as JSON to this path",
                        action="store", type=str)
    parser.add_argument("-n", "--dry-run",
                        dest="DRY_RUN",
                        help="Resolve and report without copying anything",
                        action="store_true")
    parser.add_argument("--error-on-missing",
                        dest="ERROR_ON_MISSING",
                        help="Exit with a non-zero status code if any package is missing.",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store", type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store", type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not print the report to the console.",
                        action="store_true")
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
