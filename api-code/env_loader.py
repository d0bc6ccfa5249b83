from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict


logger = logging.getLogger("chat-relay.env")


def load_local_env(env_path: Path | str = Path(".env"), *, override: bool = False) -> Dict[str, str]:
    """Load key=value pairs from a local .env file into ``os.environ``.

    Variables already present in the process environment are left alone unless
    ``override`` is set, so values injected by the hosting platform win over a
    checked-out ``.env``. Returns the pairs that were applied.
    """
    path = Path(env_path)
    if not path.is_file():
        return {}

    applied: Dict[str, str] = {}
    for lineno, raw_line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        if "=" not in line:
            logger.warning("Skipping malformed .env line %d: %s", lineno, raw_line)
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            logger.warning("Skipping .env line %d with empty key", lineno)
            continue

        value = _clean_value(value)
        if not override and key in os.environ:
            continue
        os.environ[key] = value
        applied[key] = value

    if applied:
        logger.info("Loaded %d variable(s) from %s", len(applied), path)
    return applied


def _clean_value(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    # unquoted values may carry a trailing comment
    if " #" in value:
        value = value.split(" #", 1)[0].rstrip()
    return value
