"""Shared pytest fixtures for svn-diff-commit tests."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from svn_diff_commit.core.client import SvnClient


def pytest_addoption(parser):
    """Add custom CLI options for test filtering."""
    parser.addoption(
        "--run-live",
        action="store_true",
        default=False,
        help="Run tests that require real svn and svnadmin executables",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "live: mark test as requiring real svn/svnadmin"
    )


def pytest_collection_modifyitems(config, items):
    """Skip live tests unless --run-live is passed."""
    if config.getoption("--run-live"):
        return
    skip_live = pytest.mark.skip(reason="need --run-live option to run")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


# ---------------------------------------------------------------------------
# In-memory svn
# ---------------------------------------------------------------------------


class PegRevisionError(Exception):
    pass


def _target(arg: str) -> str:
    """Split off a peg revision the way svn does; reject non-empty pegs."""
    if "@" not in arg:
        return arg
    path, _, peg = arg.rpartition("@")
    if peg:
        raise PegRevisionError(arg)
    return path


def _message(args: Sequence[str]) -> str:
    return args[list(args).index("--message") + 1]


class FakeSvnRunner:
    """Simulates ``svn`` and ``svnadmin`` against in-memory repositories.

    Repositories map URL -> {relative posix path: bytes, or None for a
    directory}.  Working copies get a real ``.svn`` directory on disk and
    a tracked-path set kept here.  Every invocation is recorded in
    ``calls`` as ``[program, *args]``; ``fail`` forces an exit status
    for a given operation name.
    """

    def __init__(self) -> None:
        self.repos: Dict[str, Dict[str, Optional[bytes]]] = {}
        self.working_copies: Dict[Path, Dict] = {}
        self.calls: List[List[str]] = []
        self.fail: Dict[str, int] = {}
        self.commit_messages: List[str] = []
        self.status_extra: str = ""

    # -- CommandRunner -----------------------------------------------------

    def invoke(self, program: str, args: Sequence[str]) -> int:
        self.calls.append([program, *args])
        op = args[0]
        if op in self.fail:
            return self.fail[op]
        try:
            if os.path.basename(program).startswith("svnadmin"):
                return self._create(args[1])
            return getattr(self, f"_svn_{op}")(list(args[1:]))
        except PegRevisionError:
            return 1

    def capture(
        self, program: str, args: Sequence[str]
    ) -> Tuple[int, str]:
        self.calls.append([program, *args])
        op = args[0]
        if op in self.fail:
            return self.fail[op], ""
        try:
            if op == "status":
                return 0, self._status(args[1])
            if op == "list":
                return self._list_recursive(list(args[1:]))
        except PegRevisionError:
            return 1, ""
        raise AssertionError(f"unexpected captured svn {op}")

    # -- helpers for assertions --------------------------------------------

    def ops(self) -> List[str]:
        """svn operation names in call order."""
        return [c[1] for c in self.calls]

    def calls_for(self, op: str) -> List[List[str]]:
        return [c for c in self.calls if c[1] == op]

    def files(self, url: str) -> Dict[str, bytes]:
        return {
            k: v for k, v in self.repos.get(url, {}).items() if v is not None
        }

    # -- internals ---------------------------------------------------------

    @staticmethod
    def _snapshot(root: Path) -> Dict[str, Optional[bytes]]:
        out: Dict[str, Optional[bytes]] = {}
        for p in sorted(root.rglob("*")):
            if ".svn" in p.relative_to(root).parts:
                continue
            rel = p.relative_to(root).as_posix()
            out[rel] = None if p.is_dir() else p.read_bytes()
        return out

    def _locate(self, path: str) -> Tuple[Path, str]:
        resolved = Path(path).resolve()
        for root in self.working_copies:
            if resolved == root or root in resolved.parents:
                return root, resolved.relative_to(root).as_posix()
        raise AssertionError(f"{path} is not inside a working copy")

    def _create(self, path: str) -> int:
        repo = Path(path)
        repo.mkdir(parents=True)
        self.repos[repo.resolve().as_uri()] = {}
        return 0

    def _svn_list(self, rest: List[str]) -> int:
        return 0 if rest[0] in self.repos else 1

    def _svn_import(self, rest: List[str]) -> int:
        source = Path(_target(rest[0]))
        if not source.is_dir():
            return 1
        self.repos[rest[1]] = self._snapshot(source)
        self.commit_messages.append(_message(rest))
        return 0

    def _svn_checkout(self, rest: List[str]) -> int:
        url = rest[0]
        if url not in self.repos:
            return 1
        wc = Path(_target(rest[1]))
        (wc / ".svn").mkdir(parents=True, exist_ok=True)
        for rel, content in self.repos[url].items():
            p = wc / rel
            if content is None:
                p.mkdir(parents=True, exist_ok=True)
            else:
                p.parent.mkdir(parents=True, exist_ok=True)
                p.write_bytes(content)
        self.working_copies[wc.resolve()] = {
            "url": url,
            "tracked": set(self.repos[url]),
        }
        return 0

    def _svn_add(self, rest: List[str]) -> int:
        assert "--force" in rest
        path = _target(rest[0])
        root, rel = self._locate(path)
        if not Path(path).exists():
            return 1
        tracked = self.working_copies[root]["tracked"]
        tracked.add(rel)
        for child in Path(path).resolve().rglob("*"):
            tracked.add(child.relative_to(root).as_posix())
        return 0

    def _status(self, wc_arg: str) -> str:
        wc_arg = _target(wc_arg)
        root = Path(wc_arg).resolve()
        tracked = self.working_copies[root]["tracked"]
        lines = []
        for rel in sorted(tracked):
            if not (root / rel).exists():
                lines.append(f"!       {os.path.join(wc_arg, *rel.split('/'))}")
        for rel in self._snapshot(root):
            if rel not in tracked:
                lines.append(f"?       {os.path.join(wc_arg, *rel.split('/'))}")
        return "\n".join(lines) + "\n" + self.status_extra

    def _svn_delete(self, rest: List[str]) -> int:
        root, rel = self._locate(_target(rest[0]))
        tracked = self.working_copies[root]["tracked"]
        if rel not in tracked:
            return 1
        for p in list(tracked):
            if p == rel or p.startswith(rel + "/"):
                tracked.discard(p)
        return 0

    def _svn_commit(self, rest: List[str]) -> int:
        root = Path(_target(rest[0])).resolve()
        wc = self.working_copies[root]
        committed: Dict[str, Optional[bytes]] = {}
        for rel in sorted(wc["tracked"]):
            p = root / rel
            if not p.exists():
                return 1
            committed[rel] = None if p.is_dir() else p.read_bytes()
        self.repos[wc["url"]] = committed
        self.commit_messages.append(_message(rest))
        return 0

    def _list_recursive(self, rest: List[str]) -> Tuple[int, str]:
        assert rest[0] == "--recursive"
        url = rest[1]
        if url not in self.repos:
            return 1, ""
        lines = [
            rel + "/" if content is None else rel
            for rel, content in sorted(self.repos[url].items())
        ]
        return 0, "".join(line + "\n" for line in lines)


@pytest.fixture
def fake_svn() -> FakeSvnRunner:
    return FakeSvnRunner()


@pytest.fixture
def svn_client(fake_svn) -> SvnClient:
    return SvnClient(fake_svn)


@pytest.fixture
def svn_available() -> bool:
    return bool(shutil.which("svn") and shutil.which("svnadmin"))
