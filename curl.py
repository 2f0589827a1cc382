"""
curl shortcuts for poking at a locally running server.

  curl   – JSON request/response headers
  xcurl  – XML request/response headers
"""
import subprocess

import logger as log

JSON = "application/json"
XML = "application/xml"


def build_command(args: list[str], media_type: str = JSON) -> list[str]:
    return [
        "curl",
        "-sS",
        "-H", f"Accept: {media_type}",
        "-H", f"Content-Type: {media_type}",
    ] + list(args)


def curl(args: list[str], *, media_type: str = JSON) -> bool:
    cmd = build_command(args, media_type)
    try:
        r = subprocess.run(cmd)
    except FileNotFoundError:
        log.error("'curl' not found on PATH.")
        return False
    if r.returncode != 0:
        log.error(f"curl failed (exit {r.returncode})")
        return False
    return True
