"""Pytest fixtures for gomod-runner tests."""
import json
import sys
from pathlib import Path
from typing import Dict, List

import pytest

# Stand-in for the go binary. Behaviour is read from stub.json next to the
# script; every invocation is appended to calls.jsonl.
FAKE_GO_SOURCE = r'''#!__PYTHON__
import json
import os
import sys
import time

here = os.path.dirname(os.path.abspath(__file__))
with open(os.path.join(here, "stub.json")) as f:
    cfg = json.load(f)

args = sys.argv[1:]
with open(os.path.join(here, "calls.jsonl"), "a") as f:
    f.write(json.dumps({"args": args, "cwd": os.getcwd()}) + "\n")

joined = " ".join(args)
if cfg.get("hang") and joined.startswith(cfg["hang"]):
    time.sleep(60)

fail = cfg.get("fail")
if fail and joined.startswith(fail["prefix"]):
    sys.stdout.write(fail.get("stdout", ""))
    sys.stdout.flush()
    sys.stderr.write(fail.get("stderr", ""))
    sys.stderr.flush()
    sys.exit(fail.get("code", 1))

if args == ["version"]:
    print(cfg["version"])
elif args == ["list", "-m"]:
    print(cfg["module"])
elif args[:2] == ["mod", "init"]:
    with open("go.mod", "w") as f:
        f.write("module %s\n\ngo 1.14\n" % args[2])
    sys.stderr.write("go: creating new go.mod: module %s\n" % args[2])
'''


class FakeGo:
    """Handle on a fake go executable living in its own directory."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.path = root / "go"
        self.path.write_text(FAKE_GO_SOURCE.replace("__PYTHON__", sys.executable))
        self.path.chmod(0o755)
        self._config = {
            "version": "go version go1.14.9 linux/amd64",
            "module": "example.com/mod",
            "hang": None,
            "fail": None,
        }
        self._write_config()

    def _write_config(self) -> None:
        (self.root / "stub.json").write_text(json.dumps(self._config))

    def configure(self, **kwargs) -> "FakeGo":
        """Update behaviour: version, module, hang=<args prefix>,
        fail={"prefix", "stdout", "stderr", "code"}."""
        self._config.update(kwargs)
        self._write_config()
        return self

    def calls(self) -> List[Dict]:
        log = self.root / "calls.jsonl"
        if not log.exists():
            return []
        return [json.loads(line) for line in log.read_text().splitlines() if line]

    def invoked_args(self) -> List[List[str]]:
        return [call["args"] for call in self.calls()]

    def reset_calls(self) -> None:
        log = self.root / "calls.jsonl"
        if log.exists():
            log.unlink()


@pytest.fixture
def fake_go(tmp_path: Path) -> FakeGo:
    """Fake go toolchain reporting go1.14.9 and module example.com/mod."""
    return FakeGo(tmp_path / "fakebin")


@pytest.fixture
def mod_dir(tmp_path: Path) -> Path:
    """Not-yet-created module directory."""
    return tmp_path / "work" / ".bingo"
