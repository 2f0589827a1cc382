"""
File-system helpers: unpack distribution archives, remove stale trees.
"""
import os
import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import Optional

import logger as log


def archive_root(names: list[str]) -> Optional[str]:
    """
    Return the single top-level directory shared by every entry in *names*,
    or None when entries sit at the archive root or under several roots.
    """
    tops = {PurePosixPath(n).parts[0] for n in names if PurePosixPath(n).parts}
    if len(tops) != 1:
        return None
    top = tops.pop()
    if any(n.rstrip("/") == top and not n.endswith("/") for n in names):
        return None   # a lone file, not a directory
    return top


def target_dir(archive: Path, dest: Path) -> Path:
    """Directory that extracting *archive* into *dest* produces."""
    with zipfile.ZipFile(archive) as zf:
        root = archive_root(zf.namelist())
    return dest / (root or archive.stem)


def extract_zip(archive: Path, dest: Path) -> Path:
    """
    Extract *archive* below *dest* and return the resulting directory.

    Archives without a common top-level directory are unpacked into
    ``dest/<archive stem>``. Unix permission bits recorded in the archive are
    restored so launch scripts stay executable.
    """
    with zipfile.ZipFile(archive) as zf:
        root = archive_root(zf.namelist())
        into = dest if root else dest / archive.stem
        into.mkdir(parents=True, exist_ok=True)
        for info in zf.infolist():
            extracted = Path(zf.extract(info, into))
            mode = (info.external_attr >> 16) & 0o777
            if mode and not info.is_dir():
                os.chmod(extracted, mode)
    result = dest / root if root else into
    log.success(f"Extracted  {archive.name}  →  {result}")
    return result


def remove_tree(path: Path) -> None:
    if path.exists():
        shutil.rmtree(path)
        log.info(f"Removed {path}")
