"""
Maven build helpers.
"""
import os
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import config as cfg
import logger as log


@dataclass(frozen=True)
class BuildMode:
    name: str
    goals: List[str]
    flags: List[str] = field(default_factory=list)


QUICK = BuildMode("quick", ["install"], ["-DskipTests", *cfg.QUALITY_SKIP_FLAGS, "-nsu"])
FULL = BuildMode("full", ["clean", "install"])
SKIP_DOCS = BuildMode("skip-docs", ["clean", "install"], [f"-P!{cfg.DOCS_PROFILE}"])
SKIP_TESTS = BuildMode("skip-tests", ["clean", "install"], ["-DskipTests"])


def maven_env() -> Dict[str, str]:
    """Copy of os.environ with MAVEN_OPTS forced to cfg.MAVEN_OPTS."""
    env = dict(os.environ)
    env["MAVEN_OPTS"] = cfg.MAVEN_OPTS
    return env


def build_command(mode: BuildMode, extra_args: Optional[List[str]] = None) -> List[str]:
    return ["mvn"] + mode.goals + mode.flags + list(extra_args or [])


def incremental_args(modules: List[str]) -> List[str]:
    """Restrict the reactor to *modules* plus everything that depends on them."""
    return ["-pl", ",".join(modules), "-amd"]


def _stream(proc: subprocess.Popen, log_file: Path, quiet: bool) -> None:
    """Copy the child's output into *log_file*, and to the terminal unless *quiet*."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    with open(log_file, "w", encoding="utf-8") as fh:
        for line in proc.stdout:
            fh.write(line)
            if not quiet:
                print(line, end="", flush=True)


def run_maven(project_dir: Path, cmd: List[str], opts: cfg.RunOptions) -> bool:
    """
    Run *cmd* (an ``mvn ...`` argument list) inside *project_dir*.

    Output goes to the terminal, or nowhere with ``opts.quiet``; with
    ``opts.save_log`` it is also written to the invocation's log file.

    Returns True on success, False on failure.
    """
    cmd = list(cmd)
    effective_env = maven_env()
    mvn_bin = shutil.which(cmd[0], path=effective_env.get("PATH", os.environ.get("PATH", "")))
    if mvn_bin:
        cmd[0] = mvn_bin

    log_file = opts.log_file()
    log.info(f"Running: {' '.join(cmd)}  (in {project_dir.name or project_dir})")
    if log_file is not None:
        log.info(f"Log file: {log_file}")
    start = time.time()

    try:
        if log_file is not None:
            proc = subprocess.Popen(
                cmd,
                cwd=project_dir,
                env=effective_env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
            _stream(proc, log_file, opts.quiet)
            returncode = proc.wait()
        else:
            out = subprocess.DEVNULL if opts.quiet else None
            returncode = subprocess.run(
                cmd, cwd=project_dir, env=effective_env, stdout=out, stderr=out
            ).returncode
    except FileNotFoundError:
        log.error("'mvn' not found – please install Apache Maven and add it to PATH.")
        return False

    elapsed = time.time() - start

    if returncode != 0:
        log.error(f"Maven failed after {log.duration(elapsed)} (exit {returncode})")
        return False

    log.success(f"Maven succeeded in {log.duration(elapsed)}")
    return True


def build(
    project_dir: Path,
    mode: BuildMode,
    opts: cfg.RunOptions,
    *,
    extra_args: Optional[List[str]] = None,
) -> bool:
    """Run one of the fixed build modes and report the result."""
    log.section(f"Maven {mode.name} build")
    ok = run_maven(project_dir, build_command(mode, extra_args), opts)
    if ok:
        log.success(f"{mode.name} build OK")
    else:
        log.error(f"{mode.name} build FAILED")
    return ok


def build_modules(
    project_dir: Path,
    modules: List[str],
    opts: cfg.RunOptions,
    *,
    extra_args: Optional[List[str]] = None,
) -> bool:
    """Quick-build *modules* and their dependents."""
    log.section(f"Maven incremental build  ({', '.join(modules)})")
    args = incremental_args(modules) + list(extra_args or [])
    ok = run_maven(project_dir, build_command(QUICK, args), opts)
    if ok:
        log.success("incremental build OK")
    else:
        log.error("incremental build FAILED")
    return ok
