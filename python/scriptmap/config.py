"""Configuration for scriptmap.

The mapping file always lives at <root>/<tmp dir>/script-mapping.properties.
The tmp directory name defaults to .gradle, a fixed location shared by every
store. Setting SCRIPTMAP_TMP_DIR_NAME moves the file elsewhere, so stores
only see each other's mappings when they agree on the override.
"""

import logging
import os

logger = logging.getLogger(__name__)

MAPPING_FILE_NAME = "script-mapping.properties"
DEFAULT_TMP_DIR_NAME = ".gradle"
TMP_DIR_ENV = "SCRIPTMAP_TMP_DIR_NAME"


def tmp_dir_name() -> str:
    """Return the build tmp directory name, honoring the env override."""
    raw = os.getenv(TMP_DIR_ENV)
    if raw is None:
        return DEFAULT_TMP_DIR_NAME

    name = raw.strip()
    if not _is_single_component(name):
        logger.warning(
            "config.invalid_tmp_dir_name",
            extra={"value": raw, "fallback": DEFAULT_TMP_DIR_NAME},
        )
        return DEFAULT_TMP_DIR_NAME
    return name


def _is_single_component(name: str) -> bool:
    if not name or name in (".", ".."):
        return False
    if os.path.isabs(name):
        return False
    seps = {os.sep, "/"}
    if os.altsep:
        seps.add(os.altsep)
    return not any(sep in name for sep in seps)
