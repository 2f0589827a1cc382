#!/usr/bin/env python3
"""
mvnflow – Maven/git shortcuts for day-to-day work on a multi-module project
==========================================================================

Usage:  mvnflow [-h] [-s] [-q] <command> [args...]

Global flags
------------
  -h    show this help and exit
  -s    save the build output to <tmp root>/<timestamp>-<branch>-<hash>/build.log
  -q    do not print build output (combine with -s to only log it)

Builds
------
  qb        quick build: install, no tests, no static analysis, no snapshot updates
  fb        full build: clean install with every gate
  sd        full build without the documentation profile
  st        full build without tests
  re        quick build of the modules with uncommitted changes (+ dependents)
  redo      re, then force-unzip the distribution, then run it
  updated   print the modules with uncommitted changes (mvn -pl syntax)

Distribution
------------
  unzip [-f]    extract the newest distribution archive (-f: overwrite without asking)
  run [args]    start the unpacked distribution's launcher
  findbin       print the launcher path
  finddist      print the distribution archive path

Logs
----
  tail [args]   tail the newest build log (default: tail -F)
  list          list saved build logs
  clean [-y]    delete saved build logs

Misc
----
  pr <n>        fetch pull request <n> into branch pr-<n> and check it out
  curl [args]   curl with JSON headers
  xcurl [args]  curl with XML headers
  upgrade       update mvnflow itself (git pull)

Any extra arguments of the build commands are passed to Maven, e.g.
  mvnflow qb -T 4
  mvnflow -s -q fb -pl core -am
"""

import argparse
import dataclasses
import os
import sys
from pathlib import Path
from typing import Callable, Dict, List

# ── make sure local modules are importable when run as a script ──────────────
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import changes
import config as cfg
import curl as curlmod
import dist
import git as gitutil
import logdir
import logger as log
import maven
import notify
import runner

OK = 0
FAILED = 1
USAGE = 2


def _fail(message: str) -> int:
    """Terminal failure path: desktop notification plus an error on stderr."""
    notify.send("mvnflow failed", message)
    log.error(message)
    return FAILED


def _with_log_dir(opts: cfg.RunOptions, root: Path) -> cfg.RunOptions:
    if not opts.save_log or opts.log_dir is not None:
        return opts
    return dataclasses.replace(opts, log_dir=logdir.create(opts.tmp_root, root))


# ─────────────────────────────────────────────────────────────────────────────
# Build commands
# ─────────────────────────────────────────────────────────────────────────────

def _build(mode: maven.BuildMode, args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    ok = maven.build(root, mode, _with_log_dir(opts, root), extra_args=args)
    return OK if ok else _fail(f"{mode.name} build failed in {root}")


def cmd_qb(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    return _build(maven.QUICK, args, opts, root)


def cmd_fb(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    return _build(maven.FULL, args, opts, root)


def cmd_sd(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    return _build(maven.SKIP_DOCS, args, opts, root)


def cmd_st(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    return _build(maven.SKIP_TESTS, args, opts, root)


def cmd_re(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    ok = runner.rebuild_updated(root, _with_log_dir(opts, root), extra_args=args)
    return OK if ok else _fail(f"Rebuild of updated modules failed in {root}")


def cmd_redo(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    ok = runner.redo(root, _with_log_dir(opts, root), run_args=args)
    return OK if ok else _fail(f"redo failed in {root}")


def cmd_updated(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    if args:
        return USAGE
    try:
        modules = changes.updated_modules(gitutil.toplevel(root))
    except RuntimeError as exc:
        return _fail(str(exc))
    if not modules:
        log.warn("No uncommitted changes to tracked files.")
        return OK
    print(changes.module_filter(modules))
    return OK


# ─────────────────────────────────────────────────────────────────────────────
# Distribution commands
# ─────────────────────────────────────────────────────────────────────────────

def cmd_unzip(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    if any(a not in ("-f", "--force") for a in args):
        return USAGE
    ok = dist.extract_latest(root, force=bool(args))
    return OK if ok else _fail("Could not extract the distribution")


def cmd_run(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    return OK if dist.run_bin(root, args) else _fail("Distribution run failed")


def cmd_findbin(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    binary = dist.find_bin(root)
    if binary is None:
        return _fail(f"No launcher found under {root}")
    print(binary)
    return OK


def cmd_finddist(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    archive = dist.find_dist(root)
    if archive is None:
        return _fail(f"No distribution archive found below {root}")
    print(archive)
    return OK


# ─────────────────────────────────────────────────────────────────────────────
# Log commands
# ─────────────────────────────────────────────────────────────────────────────

def cmd_tail(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    return OK if logdir.tail(opts.tmp_root, args) else _fail("Could not tail the build log")


def cmd_list(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    if args:
        return USAGE
    logdir.print_dirs(opts.tmp_root)
    return OK


def cmd_clean(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    if any(a not in ("-y", "--yes") for a in args):
        return USAGE
    ok = logdir.clean(opts.tmp_root, assume_yes=bool(args))
    return OK if ok else _fail(f"Could not clean build logs under {opts.tmp_root}")


# ─────────────────────────────────────────────────────────────────────────────
# Misc commands
# ─────────────────────────────────────────────────────────────────────────────

def cmd_pr(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    if len(args) != 1 or not args[0].isdigit():
        return USAGE
    ok = gitutil.checkout_pull_request(root, int(args[0]), remote=cfg.REMOTE)
    return OK if ok else _fail(f"Could not check out pull request #{args[0]}")


def cmd_curl(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    return OK if curlmod.curl(args, media_type=curlmod.JSON) else _fail("curl request failed")


def cmd_xcurl(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    return OK if curlmod.curl(args, media_type=curlmod.XML) else _fail("xcurl request failed")


def cmd_upgrade(args: List[str], opts: cfg.RunOptions, root: Path) -> int:
    if args:
        return USAGE
    log.info(f"Updating {cfg.TOOL_DIR}")
    if not gitutil.pull(cfg.TOOL_DIR):
        return _fail(f"git pull failed in {cfg.TOOL_DIR}")
    log.success("mvnflow is up to date")
    return OK


Handler = Callable[[List[str], cfg.RunOptions, Path], int]

COMMANDS: Dict[str, Handler] = {
    "qb": cmd_qb,
    "fb": cmd_fb,
    "sd": cmd_sd,
    "st": cmd_st,
    "re": cmd_re,
    "redo": cmd_redo,
    "updated": cmd_updated,
    "unzip": cmd_unzip,
    "run": cmd_run,
    "tail": cmd_tail,
    "list": cmd_list,
    "clean": cmd_clean,
    "pr": cmd_pr,
    "curl": cmd_curl,
    "xcurl": cmd_xcurl,
    "findbin": cmd_findbin,
    "finddist": cmd_finddist,
    "upgrade": cmd_upgrade,
}


# ─────────────────────────────────────────────────────────────────────────────
# CLI parser
# ─────────────────────────────────────────────────────────────────────────────

def print_usage() -> None:
    print(__doc__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mvnflow", add_help=False)
    parser.add_argument("-h", "--help", dest="help", action="store_true")
    parser.add_argument("-s", dest="save_log", action="store_true")
    parser.add_argument("-q", dest="quiet", action="store_true")
    parser.add_argument("command", nargs="?")
    parser.add_argument("args", nargs=argparse.REMAINDER)
    return parser


def dispatch(argv: List[str], root: Path) -> int:
    parsed = build_parser().parse_args(argv)
    if parsed.help or parsed.command not in COMMANDS:
        if parsed.command and not parsed.help:
            log.error(f"Unknown command: {parsed.command}")
        print_usage()
        return USAGE

    opts = cfg.RunOptions(quiet=parsed.quiet, save_log=parsed.save_log)
    handler = COMMANDS[parsed.command]
    status = handler(parsed.args, opts, root)
    if status == USAGE:
        print_usage()
    return status


# ─────────────────────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────────────────────

def main() -> None:
    try:
        status = dispatch(sys.argv[1:], Path.cwd())
    except KeyboardInterrupt:
        log.warn("Interrupted.")
        status = FAILED
    sys.exit(status)


if __name__ == "__main__":
    main()
