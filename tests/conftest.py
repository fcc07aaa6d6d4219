import os
import sys

import pytest

# Ensure repository root is on sys.path before importing project modules.
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from foundry_mcp.config import FoundryConfig  # noqa: E402
from foundry_mcp.context import ToolContext  # noqa: E402
from foundry_mcp.metrics import default_metrics  # noqa: E402
from foundry_mcp.process import CommandResult  # noqa: E402
from foundry_mcp.rpc import RpcUnreachableError  # noqa: E402


class StubProcess:
    def __init__(self, pid: int = 4242):
        self.pid = pid


class StubRunner:
    """Records every invocation instead of starting programs."""

    def __init__(self):
        self.calls = []
        self.results = []
        self.spawned = []
        self.killed = []
        self.terminated = []
        self.spawn_error = None
        self.terminate_error = None
        self.next_pid = 4242

    def queue(self, *results):
        self.results.extend(results)

    @property
    def last_args(self):
        return self.calls[-1]["args"]

    async def run(self, program, args=(), cwd=None):
        self.calls.append({"program": program, "args": list(args), "cwd": cwd})
        if self.results:
            return self.results.pop(0)
        return CommandResult.from_exit(0, "ok")

    async def spawn(self, program, args=(), cwd=None):
        if self.spawn_error is not None:
            raise self.spawn_error
        process = StubProcess(self.next_pid)
        self.spawned.append({"program": program, "args": list(args), "process": process})
        return process

    async def kill(self, process):
        self.killed.append(process)

    def terminate(self, pid):
        self.terminated.append(pid)
        if self.terminate_error is not None:
            raise self.terminate_error


class StubRpc:
    """JSON-RPC stand-in; URLs in ``down`` behave like a dead node."""

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.errors = {}
        self.down = set()

    async def call(self, url, method, params=None):
        self.calls.append({"url": url, "method": method, "params": params})
        if url in self.down:
            raise RpcUnreachableError(f"Could not reach {url}")
        if method in self.errors:
            raise self.errors[method]
        return self.responses.get(method)

    async def aclose(self):
        return None


@pytest.fixture(autouse=True)
def reset_metrics():
    default_metrics.reset()
    yield
    default_metrics.reset()


@pytest.fixture
def runner():
    return StubRunner()


@pytest.fixture
def rpc():
    return StubRpc()


@pytest.fixture
def config(tmp_path):
    return FoundryConfig(
        rpc_url=None,
        private_key=None,
        project_path=str(tmp_path),
        anvil_startup_delay=0,
    )


@pytest.fixture
def ctx(config, runner, rpc):
    return ToolContext(config=config, runner=runner, rpc=rpc)
