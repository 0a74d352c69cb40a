from __future__ import annotations

import base64
import logging
import mimetypes
import os
import shutil
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union
from urllib.parse import unquote

logger = logging.getLogger(__name__)

# Files handed over from sandboxed apps live under ~/Library/Containers and
# are not always readable by helper processes; such files are copied first.
SANDBOX_MARKER = "/Containers/"
LARGE_FILE_BYTES = 10 * 1024 * 1024

PathLike = Union[str, Path]


def normalize_path(path: str) -> str:
    """Turn a `file://` URL (as copied from Finder) into a filesystem path."""
    path = path.strip()
    if path.startswith("file://"):
        path = unquote(path[len("file://"):])
    return os.path.expanduser(path)


@contextmanager
def working_copy(path: PathLike) -> Iterator[Path]:
    src = Path(path)
    if SANDBOX_MARKER not in str(src):
        yield src
        return

    tmp = Path(tempfile.gettempdir()) / f"reminder-ai-{int(time.time() * 1000)}-{src.name}"
    try:
        logger.info(f"Copying sandboxed file to temp: {tmp}")
        shutil.copyfile(src, tmp)
    except OSError as e:
        logger.warning(f"Copy failed, using original path: {e}")
        yield src
        return

    try:
        yield tmp
    finally:
        try:
            tmp.unlink()
        except OSError:
            logger.debug(f"Could not remove temp file {tmp}")


def file_size(path: PathLike) -> int:
    try:
        return Path(path).stat().st_size
    except OSError as e:
        logger.error(f"Could not stat {path}: {e}")
        return 0


def mime_type(path: PathLike) -> str:
    guessed, _ = mimetypes.guess_type(str(path))
    return guessed or "application/pdf"


def to_data_uri(path: PathLike) -> str:
    """Read a file and return it as a base64 `data:` URI."""
    with working_copy(path) as p:
        try:
            raw = p.read_bytes()
        except OSError as e:
            raise OSError(f"Failed to convert {path} to base64: {e}") from e
    logger.info(f"Converted {len(raw)} bytes to base64")
    encoded = base64.b64encode(raw).decode("ascii")
    return f"data:{mime_type(path)};base64,{encoded}"
