"""
Multi-step run configurations:
  - rebuild_updated : quick-build only the modules with uncommitted changes
  - redo            : rebuild_updated → forced extract → run
"""
from pathlib import Path
from typing import List, Optional

import changes
import config as cfg
import dist
import git as gitutil
import logger as log
import maven


def rebuild_updated(
    root: Path,
    opts: cfg.RunOptions,
    *,
    extra_args: Optional[List[str]] = None,
) -> bool:
    """
    Quick-build the modules touched by uncommitted changes plus their
    dependents. An unchanged tree is an error: nothing is built.

    Maven runs from the work-tree top level, wherever inside it *root* is.
    """
    try:
        top = gitutil.toplevel(root)
        modules = changes.updated_modules(top)
    except RuntimeError as exc:
        log.error(str(exc))
        return False

    if not modules:
        log.error("No uncommitted changes to tracked files – nothing to rebuild.")
        return False

    log.info(f"Updated modules: {changes.module_filter(modules)}")
    return maven.build_modules(top, modules, opts, extra_args=extra_args)


def redo(root: Path, opts: cfg.RunOptions, run_args: Optional[List[str]] = None) -> bool:
    """Rebuild what changed, replace the unpacked distribution and launch it."""
    log.banner("Redo", "rebuild updated modules  →  extract distribution  →  run")

    steps = [
        ("Rebuild updated modules", lambda: rebuild_updated(root, opts)),
        ("Extract distribution", lambda: dist.extract_latest(root, force=True)),
        ("Run distribution", lambda: dist.run_bin(root, list(run_args or []))),
    ]
    total = len(steps)
    for i, (title, action) in enumerate(steps, 1):
        log.step(i, total, title)
        if not action():
            log.error(f"Redo stopped at: {title}")
            return False
    return True
