"""
Per-invocation build log directories under cfg.TMP_ROOT.

Each directory is named ``<YYYYmmdd-HHMMSS>-<branch>-<shorthash>`` so that
lexical order is chronological order.
"""
from __future__ import annotations

import re
import shutil
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

import config as cfg
import git as gitutil
import logger as log

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def dir_name(branch: Optional[str], commit: Optional[str], when: Optional[datetime] = None) -> str:
    stamp = (when or datetime.now()).strftime("%Y%m%d-%H%M%S")
    branch_part = _UNSAFE.sub("_", branch) if branch else "nobranch"
    return f"{stamp}-{branch_part}-{commit or 'nohash'}"


def create(tmp_root: Path, repo: Path) -> Path:
    """Create and return a fresh log directory for a build of *repo*."""
    path = tmp_root / dir_name(gitutil.current_branch(repo), gitutil.short_hash(repo))
    path.mkdir(parents=True, exist_ok=True)
    return path


def list_dirs(tmp_root: Path) -> list[Path]:
    """Log directories, newest first."""
    if not tmp_root.is_dir():
        return []
    return sorted((p for p in tmp_root.iterdir() if p.is_dir()), key=lambda p: p.name, reverse=True)


def latest_log(tmp_root: Path) -> Optional[Path]:
    for d in list_dirs(tmp_root):
        candidate = d / cfg.LOG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def print_dirs(tmp_root: Path) -> None:
    dirs = list_dirs(tmp_root)
    if not dirs:
        log.warn(f"No build logs under {tmp_root}")
        return
    rows = []
    for d in dirs:
        logfile = d / cfg.LOG_FILE_NAME
        size = f"{logfile.stat().st_size / 1024:.1f} KB" if logfile.is_file() else "-"
        rows.append((d.name, size, str(d)))
    log.table(f"Build logs ({tmp_root})", ["Run", "Log size", "Path"], rows)


def tail(tmp_root: Path, args: list[str]) -> bool:
    """Run ``tail`` (default ``-F``) on the newest build log."""
    logfile = latest_log(tmp_root)
    if logfile is None:
        log.error(f"No build log found under {tmp_root} (build with -s to keep one).")
        return False
    cmd = ["tail"] + (args or ["-F"]) + [str(logfile)]
    log.info(f"Following {logfile}")
    try:
        return subprocess.run(cmd).returncode == 0
    except FileNotFoundError:
        log.error("'tail' not found on PATH.")
        return False
    except KeyboardInterrupt:
        # Ctrl+C is the normal way to leave tail -F
        return True


def clean(tmp_root: Path, *, assume_yes: bool = False) -> bool:
    """
    Remove every log directory after confirmation.

    Returns False only when a directory could not be removed; nothing to
    clean and a declined prompt both count as success.
    """
    dirs = list_dirs(tmp_root)
    if not dirs:
        log.info(f"Nothing to clean under {tmp_root}")
        return True
    noun = "directory" if len(dirs) == 1 else "directories"
    if not assume_yes and not log.confirm(f"Delete {len(dirs)} log {noun} under {tmp_root}?"):
        log.info("Left build logs untouched.")
        return True
    for d in dirs:
        try:
            shutil.rmtree(d)
        except OSError as exc:
            log.error(f"Could not remove {d}: {exc}")
            return False
    log.success(f"Removed {len(dirs)} log {noun}")
    return True
