from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union


log = logging.getLogger(__name__)
PathLike = Union[str, Path]


def _ensure_parent(p: Path) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)


def ensure_dir(path: PathLike) -> Path:
    """Create ``path`` as a directory, failing when a file already sits there."""

    p = Path(path)
    if p.exists() and not p.is_dir():
        raise NotADirectoryError(f"expected a directory but found a file: {p}")
    p.mkdir(parents=True, exist_ok=True)
    return p


def write_json(
    path: PathLike,
    obj: Any,
    *,
    encoding: str = "utf-8",
    indent: Optional[int] = 2,
) -> Path:
    """Write ``obj`` to ``path`` through a temp file and an atomic rename.

    Readers of ``path`` see either the previous document or the complete new
    one, never a partial write.
    """

    p = Path(path)
    _ensure_parent(p)
    separators = (",", ":") if indent is None else None
    with tempfile.NamedTemporaryFile(
        "w", delete=False, dir=str(p.parent), encoding=encoding, suffix=".tmp"
    ) as tmp:
        tmp_name = tmp.name
        try:
            json.dump(obj, tmp, ensure_ascii=False, indent=indent, separators=separators, default=str)
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            tmp.close()
            os.unlink(tmp_name)
            raise
    try:
        os.replace(tmp_name, p)
    except OSError:
        os.unlink(tmp_name)
        raise
    log.debug(
        "write_json: %s (keys=%s)",
        p,
        len(obj) if isinstance(obj, dict) else type(obj).__name__,
    )
    return p
