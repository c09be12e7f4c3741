"""Copy resolved artifacts into the target directory."""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, List, Union

try:
    from ..constants import Constants
except Exception:  # ImportError or relative depth issues when imported as "resolution..."
    from constants import Constants

logger = logging.getLogger(__name__)


def destination_name(filename: str) -> str:
    """Rename a fallback artifact extension to the one consumers expect.

    ``foo-1.0.srcaar`` becomes ``foo-1.0.aar``; other names are unchanged.
    """
    index = filename.rfind(".")
    if index > 0 and filename[index:] == f".{Constants.FALLBACK_TYPE}":
        return filename[:index] + Constants.FALLBACK_COPY_EXTENSION
    return filename


def copy_artifacts(files: Iterable[Union[str, Path]], target_dir: Union[str, Path]) -> List[str]:
    """Copy ``files`` into ``target_dir`` and return the names written.

    Raises:
        OSError: if the directory cannot be created or a file cannot be copied
    """
    os.makedirs(target_dir, exist_ok=True)
    copied = []
    for source in sorted(files, key=str):
        name = destination_name(os.path.basename(str(source)))
        shutil.copyfile(source, os.path.join(target_dir, name))
        logger.debug("Copied %s to %s", source, name)
        copied.append(name)
    return copied
