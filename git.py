"""
Git helpers for the working tree mvnflow is invoked in.

Public API
----------
  toplevel(path)                      → Path
  current_branch(path)                → str | None
  short_hash(path)                    → str | None
  status_porcelain(path)              → str
  checkout_pull_request(path, number) → bool
  pull(path)                          → bool
"""
from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Optional

import logger as log

# ── git executable ─────────────────────────────────────────────────────────

def _git() -> Optional[str]:
    """Return the path to git, or None if not found."""
    return shutil.which("git")


def _run(args: list[str], cwd: Path, capture: bool = True) -> subprocess.CompletedProcess:
    """Run a git sub-command, return the CompletedProcess."""
    git = _git()
    if git is None:
        raise RuntimeError("git executable not found on PATH.")
    return subprocess.run(
        [git] + args,
        cwd=str(cwd),
        capture_output=capture,
        text=True,
    )


# ── Queries ────────────────────────────────────────────────────────────────

def toplevel(path: Path) -> Path:
    """
    Return the top-level directory of the work-tree containing *path*.

    Raises RuntimeError outside a work-tree or when git is missing.
    """
    r = _run(["rev-parse", "--show-toplevel"], cwd=path)
    if r.returncode != 0:
        raise RuntimeError(f"Not inside a git work-tree: {path}")
    return Path(r.stdout.strip())


def current_branch(path: Path) -> Optional[str]:
    """Return the checked-out branch name, or None (detached HEAD, no repo)."""
    try:
        r = _run(["symbolic-ref", "--short", "HEAD"], cwd=path)
    except RuntimeError:
        return None
    return r.stdout.strip() if r.returncode == 0 else None


def short_hash(path: Path) -> Optional[str]:
    """Return the abbreviated hash of HEAD, or None."""
    try:
        r = _run(["rev-parse", "--short", "HEAD"], cwd=path)
    except RuntimeError:
        return None
    return r.stdout.strip() if r.returncode == 0 else None


def status_porcelain(path: Path) -> str:
    """
    Return ``git status --porcelain`` output for tracked files only.

    Raises RuntimeError when git is missing or the command fails, so an
    unreadable status is never mistaken for a clean tree.
    """
    r = _run(["status", "--porcelain", "--untracked-files=no"], cwd=path)
    if r.returncode != 0:
        raise RuntimeError(f"git status failed: {r.stderr.strip()}")
    return r.stdout


# ── Commands ───────────────────────────────────────────────────────────────

def checkout_pull_request(path: Path, number: int, *, remote: str = "origin") -> bool:
    """Fetch ``pull/<number>/head`` from *remote* into ``pr-<number>`` and check it out."""
    branch = f"pr-{number}"
    try:
        r = _run(["fetch", remote, f"pull/{number}/head:{branch}"], cwd=path, capture=False)
        if r.returncode != 0:
            log.error(f"Could not fetch pull request #{number} from {remote}.")
            return False
        r = _run(["checkout", branch], cwd=path, capture=False)
    except RuntimeError as exc:
        log.error(str(exc))
        return False
    if r.returncode != 0:
        log.error(f"Could not check out {branch}.")
        return False
    log.success(f"Checked out pull request #{number} as {branch}")
    return True


def pull(path: Path) -> bool:
    """Run ``git pull --ff-only`` for the repo at *path*."""
    try:
        r = _run(["pull", "--ff-only"], cwd=path, capture=False)
    except RuntimeError as exc:
        log.error(str(exc))
        return False
    return r.returncode == 0
