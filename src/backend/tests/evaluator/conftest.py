import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import evaluator...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import threading
import time
from pathlib import Path

import pytest

from evaluator.config import EvaluatorSettings, RulesConfig
from evaluator.context import RuleContext
from evaluator.errors import SourceUnavailable
from evaluator.models import VcsInfo, VcsType
from evaluator.source_tree import SourceTree


class FakeCloner:
    """Writes a fixed set of files instead of cloning, and counts how often it was asked to."""

    def __init__(self, files=None, *, fail_with=None, delay: float = 0.0):
        self.files = files or {}
        self.fail_with = fail_with
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def clone(self, vcs_info: VcsInfo, target_dir: Path) -> None:
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        for rel, content in self.files.items():
            path = target_dir / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")


@pytest.fixture
def add_files():
    def _add(root: Path, *paths: str, content: str = "") -> None:
        assert root.is_dir()
        for rel in paths:
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

    return _add


@pytest.fixture
def add_dirs():
    def _add(root: Path, *paths: str) -> None:
        assert root.is_dir()
        for rel in paths:
            (root / rel).mkdir(parents=True, exist_ok=True)

    return _add


@pytest.fixture
def project_dir(tmp_path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def make_tree(project_dir, add_files, add_dirs):
    def _make(*, files=(), dirs=(), content: str = "") -> SourceTree:
        add_files(project_dir, *files, content=content)
        add_dirs(project_dir, *dirs)
        return SourceTree.for_local_dir(project_dir, VcsType.GIT)

    return _make


@pytest.fixture
def clone_settings(tmp_path) -> EvaluatorSettings:
    return EvaluatorSettings(clone_dir=str(tmp_path / "clones"), git_executable="git", clone_depth=0)


@pytest.fixture
def vcs_info() -> VcsInfo:
    return VcsInfo(type=VcsType.GIT, url="https://example.com/project.git", revision="main")


@pytest.fixture
def make_remote_tree(vcs_info, clone_settings):
    def _make(cloner: FakeCloner, *, info: VcsInfo | None = None) -> SourceTree:
        return SourceTree.for_remote(info or vcs_info, cloner=cloner, settings=clone_settings)

    return _make


@pytest.fixture
def fake_cloner():
    def _make(files=None, **kwargs) -> FakeCloner:
        return FakeCloner(files, **kwargs)

    return _make


@pytest.fixture
def clone_failure() -> SourceUnavailable:
    return SourceUnavailable("https://example.com/project.git@main", "authentication failed")


@pytest.fixture
def make_ctx():
    def _make(*, source_tree: SourceTree, analysis_result=None, rules: dict | None = None) -> RuleContext:
        return RuleContext(
            analysis_result=analysis_result,
            source_tree=source_tree,
            rules_config=RulesConfig(rules=rules or {}),
        )

    return _make
