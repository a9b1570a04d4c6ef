from __future__ import annotations

import os
import shutil
import tempfile
import threading
from pathlib import Path
from typing import Iterator, Optional, Sequence

from loguru import logger

from .config import EvaluatorSettings, get_settings
from .errors import SourceUnavailable
from .models import MaterializationState, VcsInfo, VcsType
from .patterns import GlobPattern, compile_content_pattern, compile_globs
from .vcs import Cloner, GitCloner

VCS_METADATA_DIRS = frozenset({".git", ".hg", ".svn"})


class SourceTree:
    """The source files of a project, either in a local directory or in a repository that is cloned on first use.

    Queries are answered by walking the materialized root. A remote tree is cloned at most once; if that clone fails,
    every later query raises `SourceUnavailable` rather than reporting "no match".
    """

    def __init__(
        self,
        *,
        vcs_type: VcsType,
        root: Optional[Path] = None,
        vcs_info: Optional[VcsInfo] = None,
        cloner: Optional[Cloner] = None,
        settings: Optional[EvaluatorSettings] = None,
    ):
        if root is None and vcs_info is None:
            raise ValueError("SourceTree needs either a local root or a VCS descriptor")
        self._vcs_type = vcs_type
        self._vcs_info = vcs_info
        self._cloner = cloner
        self._settings = settings
        self._lock = threading.Lock()
        self._root = root
        self._failure: Optional[SourceUnavailable] = None
        self._state = MaterializationState.READY if root is not None else MaterializationState.NOT_CLONED

    @classmethod
    def for_local_dir(cls, path: "str | os.PathLike[str]", vcs_type: VcsType = VcsType.UNKNOWN) -> "SourceTree":
        """A tree over an existing directory.

        Unlike a remote tree there is nothing to materialize, so the directory is checked and resolved here and the
        tree starts out `READY`. A missing directory raises `SourceUnavailable` immediately.
        """
        root = Path(path)
        if not root.is_dir():
            raise SourceUnavailable(str(root), "not an existing directory")
        return cls(vcs_type=vcs_type, root=root.resolve())

    @classmethod
    def for_remote(
        cls,
        vcs_info: VcsInfo,
        cloner: Optional[Cloner] = None,
        settings: Optional[EvaluatorSettings] = None,
    ) -> "SourceTree":
        return cls(vcs_type=vcs_info.type, vcs_info=vcs_info, cloner=cloner, settings=settings)

    @property
    def state(self) -> MaterializationState:
        return self._state

    @property
    def vcs_type(self) -> VcsType:
        return self._vcs_type

    @property
    def vcs_info(self) -> Optional[VcsInfo]:
        return self._vcs_info

    @property
    def location(self) -> str:
        if self._vcs_info is not None:
            return self._vcs_info.describe()
        return str(self._root)

    @property
    def root(self) -> Path:
        """The materialized root directory. Accessing this may clone the repository."""
        return self._materialize()

    def has_directory(self, *patterns: str) -> bool:
        globs = compile_globs(patterns)
        return any(is_dir and _matches_any(globs, path) for path, is_dir in _iter_entries(self.root))

    def has_file(self, *patterns: str) -> bool:
        globs = compile_globs(patterns)
        return any(not is_dir and _matches_any(globs, path) for path, is_dir in _iter_entries(self.root))

    def has_file_with_contents(self, content_pattern: str, *file_patterns: str) -> bool:
        content = compile_content_pattern(content_pattern)
        globs = compile_globs(file_patterns)
        root = self.root
        for path, is_dir in _iter_entries(root):
            if is_dir or not _matches_any(globs, path):
                continue
            text = _read_text(root / path)
            if text is not None and content.search(text):
                return True
        return False

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------
    def _materialize(self) -> Path:
        with self._lock:
            if self._state is MaterializationState.READY:
                return self._root  # type: ignore[return-value]
            if self._state is MaterializationState.FAILED:
                failure = self._failure
                raise SourceUnavailable(failure.location, failure.reason) from failure

            self._state = MaterializationState.CLONING
            try:
                root = self._clone()
            except SourceUnavailable as exc:
                self._fail(exc)
                raise
            except Exception as exc:
                failure = SourceUnavailable(self.location, f"{type(exc).__name__}: {exc}")
                self._fail(failure)
                raise failure from exc

            self._root = root
            self._state = MaterializationState.READY
            logger.info("Source tree for {} is ready at {}", self.location, root)
            return root

    def _fail(self, failure: SourceUnavailable) -> None:
        self._failure = failure
        self._state = MaterializationState.FAILED
        logger.error("Could not obtain source tree for {}: {}", self.location, failure.reason)

    def _clone(self) -> Path:
        vcs_info = self._vcs_info
        settings = self._settings or get_settings()
        cloner = self._cloner or GitCloner(settings)

        parent = settings.clone_dir or None
        try:
            if parent:
                Path(parent).mkdir(parents=True, exist_ok=True)
            target = Path(tempfile.mkdtemp(prefix="evaluator-", dir=parent))
        except OSError as exc:
            raise SourceUnavailable(self.location, f"cannot create clone directory: {exc}") from exc

        logger.info("Cloning {} into {}", self.location, target)
        try:
            cloner.clone(vcs_info, target)
        except Exception:
            shutil.rmtree(target, ignore_errors=True)
            raise

        root = target / vcs_info.path if vcs_info.path else target
        if not root.is_dir():
            shutil.rmtree(target, ignore_errors=True)
            raise SourceUnavailable(self.location, f"path '{vcs_info.path}' does not exist in the repository")
        return root

    def __repr__(self) -> str:
        return f"SourceTree({self.location!r}, state={self._state.value})"


def _matches_any(globs: Sequence[GlobPattern], path: str) -> bool:
    return any(glob.matches(path) for glob in globs)


def _iter_entries(root: Path) -> Iterator[tuple[str, bool]]:
    """Yield ``(relative_path, is_dir)`` for every file and directory below ``root``.

    Unreadable entries, broken links and special files are skipped. Linked directories are reported but not entered.
    """
    stack: list[tuple[str, str]] = [(str(root), "")]
    while stack:
        directory, prefix = stack.pop()
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as exc:
            logger.debug("Skipping unreadable directory {}: {}", directory, exc)
            continue

        for entry in entries:
            relative = f"{prefix}{entry.name}"
            try:
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
                is_link = entry.is_symlink()
            except OSError as exc:
                logger.debug("Skipping {}: {}", relative, exc)
                continue

            if is_dir:
                if entry.name in VCS_METADATA_DIRS:
                    continue
                yield relative, True
                if not is_link:
                    stack.append((entry.path, f"{relative}/"))
            elif is_file:
                yield relative, False


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug("Skipping unreadable file {}: {}", path, exc)
        return None
