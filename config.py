"""
Central configuration for mvnflow.
Values are resolved from environment variables once at import time; the
per-invocation flags travel separately in a RunOptions value.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# ── Tool layout ───────────────────────────────────────────────────────────────
TOOL_DIR = Path(__file__).resolve().parent   # checkout that 'upgrade' pulls

# ── Logs ──────────────────────────────────────────────────────────────────────
# Every build run with -s writes <TMP_ROOT>/<timestamp>-<branch>-<hash>/build.log
TMP_ROOT = Path(os.environ.get("MVNFLOW_TMP_ROOT", "/tmp/mvnflow"))
LOG_FILE_NAME = "build.log"

# ── Maven ─────────────────────────────────────────────────────────────────────
# Exported as MAVEN_OPTS for every Maven invocation, whatever the caller's env.
MAVEN_OPTS = os.environ.get("MVNFLOW_MAVEN_OPTS", "-Xmx2g")

# Flags that turn off the static-analysis gates for quick builds.
QUALITY_SKIP_FLAGS = [
    "-Dcheckstyle.skip",
    "-Denforcer.skip",
    "-Dspotbugs.skip",
    "-Dpmd.skip",
    "-Drevapi.skip",
    "-Dformatter.skip",
    "-Dimpsort.skip",
    "-Djacoco.skip",
    "-Dmaven.javadoc.skip",
]

DOCS_PROFILE = "documentation"

# ── Distribution ──────────────────────────────────────────────────────────────
DIST_GLOB = "*-SNAPSHOT.zip"
DIST_EXCLUDES = (
    "*-sources.zip",
    "*-javadoc.zip",
    "*-tests.zip",
    "*-src.zip",
    "*-docs.zip",
)
SNAPSHOT_DIR_GLOB = "*-SNAPSHOT"
BIN_GLOB = os.environ.get("MVNFLOW_BIN_GLOB", "*.sh")

# ── Git ───────────────────────────────────────────────────────────────────────
REMOTE = os.environ.get("MVNFLOW_REMOTE", "origin")


@dataclass(frozen=True)
class RunOptions:
    """Global flags for one invocation, handed to every build operation."""
    quiet: bool = False
    save_log: bool = False
    tmp_root: Path = TMP_ROOT
    log_dir: Optional[Path] = None

    def log_file(self) -> Optional[Path]:
        if not self.save_log or self.log_dir is None:
            return None
        return self.log_dir / LOG_FILE_NAME
