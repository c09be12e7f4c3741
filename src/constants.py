"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_WARNINGS = 3
    CONFIG_ERROR = 4


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    GOOGLE_MAVEN_URL = "https://maven.google.com"
    MAVEN_CENTRAL_URL = "https://repo1.maven.org/maven2"
    ANDROID_SDK_REPOSITORIES = [
        "extras/android/m2repository",
        "extras/google/m2repository",
    ]
    MAVEN_LOCAL_DIR = "~/.m2/repository"

    # Artifact type tried when the default type of a package is not found.
    FALLBACK_TYPE = "srcaar"
    # Extension written to the target directory for fallback artifacts.
    FALLBACK_COPY_EXTENSION = ".aar"
    DEFAULT_PACKAGING = "jar"

    # Environment variables (names kept from the Gradle property interface).
    ENV_PACKAGES = "PACKAGES_TO_COPY"
    ENV_REPOS = "MAVEN_REPOS"
    ENV_TARGET_DIR = "TARGET_DIR"
    ENV_ANDROID_HOME = "ANDROID_HOME"
    ENV_LOG_LEVEL = "AARFETCH_LOG_LEVEL"
    LIST_SEPARATOR = ";"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_CACHE_TTL_SEC = 300
    DOWNLOAD_CHUNK_SIZE = 64 * 1024
    USER_AGENT = "aarfetch/1.0"
