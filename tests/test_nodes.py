import pytest

from foundry_mcp.nodes import NodeInstance, NodeRegistry


def test_register_and_lookup():
    registry = NodeRegistry()
    registry.register(NodeInstance(port=8546, pid=11, fork_url="http://fork"))
    assert 8546 in registry
    assert registry.get(8546).pid == 11
    assert len(registry) == 1


def test_register_rejects_duplicate_port():
    registry = NodeRegistry()
    registry.register(NodeInstance(port=8545, pid=1))
    with pytest.raises(ValueError):
        registry.register(NodeInstance(port=8545, pid=2))
    assert registry.get(8545).pid == 1


def test_remove_returns_instance_once():
    registry = NodeRegistry()
    registry.register(NodeInstance(port=8545, pid=1))
    assert registry.remove(8545).pid == 1
    assert registry.remove(8545) is None
    assert 8545 not in registry


def test_snapshot_sorted_and_hides_process():
    registry = NodeRegistry()
    registry.register(NodeInstance(port=9000, pid=2, process=object()))
    registry.register(NodeInstance(port=8545, pid=1))
    snapshot = registry.snapshot()
    assert [entry["port"] for entry in snapshot] == [8545, 9000]
    assert "process" not in snapshot[0]
    assert snapshot[0]["forkUrl"] is None


def test_iteration_is_safe_while_removing():
    registry = NodeRegistry()
    registry.register(NodeInstance(port=1, pid=1))
    registry.register(NodeInstance(port=2, pid=2))
    for instance in registry:
        registry.remove(instance.port)
    assert len(registry) == 0
