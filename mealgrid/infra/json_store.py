"""JSON file helpers shared by the repositories.

Reads never raise on a missing or corrupt file (the caller gets the default);
writes go to a temp file in the same directory and are moved into place.
"""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from threading import RLock
from typing import Any, Union

logger = logging.getLogger(__name__)

# Guards read-modify-write cycles on the data files within one process
FILE_LOCK = RLock()

PathLike = Union[str, Path]


def load_json(path: PathLike, default: Any) -> Any:
    if not os.path.exists(path):
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s, using empty data: %s", path, e)
        return default
    if not isinstance(data, type(default)):
        logger.warning("Unexpected content in %s, using empty data", path)
        return default
    return data


def atomic_write(path: PathLike, data: Any) -> None:
    directory = os.path.dirname(os.fspath(path)) or "."
    os.makedirs(directory, exist_ok=True)
    stem = Path(path).stem
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=f".{stem}_", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            json.dump(data, tmp, indent=2, ensure_ascii=False)
        shutil.move(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


__all__ = ["FILE_LOCK", "load_json", "atomic_write"]
