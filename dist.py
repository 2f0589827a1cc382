"""
Distribution discovery and lifecycle: find the packaged archive a full build
produced, unpack it next to the sources and launch the unpacked runtime.
"""
from __future__ import annotations

import fnmatch
import signal
import subprocess
import zipfile
from pathlib import Path
from typing import Optional

import config as cfg
import fs
import logger as log


def _newest(paths) -> Optional[Path]:
    paths = list(paths)
    if not paths:
        return None
    return max(paths, key=lambda p: p.stat().st_mtime)


def _excluded(name: str) -> bool:
    return any(fnmatch.fnmatch(name, pattern) for pattern in cfg.DIST_EXCLUDES)


def find_dist(root: Path) -> Optional[Path]:
    """Newest distribution archive in any ``target/`` directory below *root*."""
    candidates = (
        p for p in root.glob(f"**/target/{cfg.DIST_GLOB}")
        if p.is_file() and not _excluded(p.name)
    )
    return _newest(candidates)


def find_bin(root: Path) -> Optional[Path]:
    """Newest launch script in ``<snapshot dir>/bin/`` directly under *root*."""
    candidates = []
    for snapshot in root.glob(cfg.SNAPSHOT_DIR_GLOB):
        if not snapshot.is_dir():
            continue
        candidates.extend(p for p in (snapshot / "bin").glob(cfg.BIN_GLOB) if p.is_file())
    return _newest(candidates)


def extract(archive: Path, dest: Path, *, force: bool = False) -> bool:
    """
    Unpack *archive* into *dest*.

    An existing directory of the same name is removed first when *force* is
    set, otherwise only after confirmation. Declining leaves everything as it
    was and still counts as success.
    """
    try:
        target = fs.target_dir(archive, dest)
    except (OSError, zipfile.BadZipFile) as exc:
        log.error(f"Cannot read {archive.name}: {exc}")
        return False

    if target.exists():
        if not force and not log.confirm(f"{target} already exists. Delete it and extract again?"):
            log.info(f"Kept existing {target}")
            return True
        fs.remove_tree(target)
    try:
        fs.extract_zip(archive, dest)
    except (OSError, zipfile.BadZipFile) as exc:
        log.error(f"Failed to extract {archive.name}: {exc}")
        return False
    return True


def extract_latest(root: Path, *, force: bool = False) -> bool:
    archive = find_dist(root)
    if archive is None:
        log.error(f"No distribution archive ({cfg.DIST_GLOB}) found below {root}. Run a full build first.")
        return False
    log.info(f"Distribution: {archive.relative_to(root)}")
    return extract(archive, root, force=force)


def run_bin(root: Path, args: list[str]) -> bool:
    """Run the unpacked launch script with *args*, blocking until it exits."""
    binary = find_bin(root)
    if binary is None:
        log.error(
            f"No {cfg.BIN_GLOB} launcher found in {cfg.SNAPSHOT_DIR_GLOB}/bin under {root}. "
            "Run 'unzip' first."
        )
        return False

    cmd = [str(binary)] + list(args)
    log.section("Launching distribution")
    log.info(f"Command:     {' '.join(cmd)}")
    log.info("Press Ctrl+C to stop.\n")

    proc = None
    try:
        proc = subprocess.Popen(cmd, cwd=binary.parent.parent)
        returncode = proc.wait()
    except KeyboardInterrupt:
        log.warn("Interrupt received – stopping…")
        if proc:
            proc.send_signal(signal.SIGTERM)
            try:
                proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                proc.kill()
        log.info("Application stopped.")
        return True
    except (FileNotFoundError, PermissionError) as exc:
        log.error(f"Cannot execute {binary}: {exc}")
        return False

    if returncode != 0:
        log.error(f"{binary.name} exited with status {returncode}")
        return False
    return True
