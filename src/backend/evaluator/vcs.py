"""Cloning remote repositories into a local working tree."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Protocol

from loguru import logger

from .config import EvaluatorSettings, get_settings
from .errors import SourceUnavailable
from .models import VcsInfo, VcsType


class Cloner(Protocol):
    def clone(self, vcs_info: VcsInfo, target_dir: Path) -> None:
        """Populate the empty ``target_dir`` with the working tree of ``vcs_info``.

        Raises ``SourceUnavailable`` if the repository cannot be obtained.
        """


class GitCloner:
    """Clone Git repositories with the ``git`` command line client."""

    def __init__(self, settings: Optional[EvaluatorSettings] = None):
        self._settings = settings or get_settings()

    def clone(self, vcs_info: VcsInfo, target_dir: Path) -> None:
        if vcs_info.type is not VcsType.GIT:
            kind = vcs_info.type.value or "unknown"
            raise SourceUnavailable(vcs_info.describe(), f"no cloner available for VCS type '{kind}'")

        git = self._settings.git_executable
        depth = ["--depth", str(self._settings.clone_depth)] if self._settings.clone_depth else []

        if vcs_info.revision:
            self._run(vcs_info, [git, "init", "--quiet"], cwd=target_dir)
            self._run(vcs_info, [git, "remote", "add", "origin", vcs_info.url], cwd=target_dir)
            self._run(
                vcs_info,
                [git, "fetch", "--quiet", *depth, "origin", vcs_info.revision],
                cwd=target_dir,
            )
            self._run(vcs_info, [git, "checkout", "--quiet", "FETCH_HEAD"], cwd=target_dir)
        else:
            self._run(vcs_info, [git, "clone", "--quiet", *depth, vcs_info.url, str(target_dir)])

    def _run(self, vcs_info: VcsInfo, args: list[str], cwd: Optional[Path] = None) -> None:
        logger.debug("Running {}", " ".join(args))
        try:
            subprocess.run(args, cwd=cwd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            raise SourceUnavailable(
                vcs_info.describe(), f"'git {args[1]}' failed with exit code {exc.returncode}: {stderr}"
            ) from exc
        except OSError as exc:
            raise SourceUnavailable(vcs_info.describe(), f"cannot run '{args[0]}': {exc}") from exc
