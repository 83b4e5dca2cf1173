import threading

import pytest

from lockpick.lock_graph import LockGraph, LockGraphError


def committed_graph(blocks, deps=(), mutual=()):
    graph = LockGraph(blocks)
    for locker, lockee in deps:
        graph.add_dep(locker, lockee)
    for a, b in mutual:
        graph.add_dep_mutual(a, b)
    graph.commit()
    return graph


def test_lock_holds_off_lockee():
    graph = committed_graph(3, deps=[(0, 1)])
    graph.lock(0)
    assert graph.locked(1) is True
    assert graph.locked(2) is False
    assert graph.locked(0) is False
    graph.unlock(0)
    assert graph.locked(1) is False


def test_mutual_dependency_is_symmetric():
    graph = committed_graph(2, mutual=[(0, 1)])
    graph.lock(1)
    assert graph.locked(0) is True
    graph.unlock(1)
    graph.lock(0)
    assert graph.locked(1) is True
    graph.unlock(0)
    assert graph.locked(1) is False


def test_mutual_self_dependency_added_once():
    graph = LockGraph(1)
    graph.add_dep_mutual(0, 0)
    graph.commit()
    graph.lock(0)
    assert graph.locked(0) is True
    graph.unlock(0)
    assert graph.locked(0) is False


def test_duplicate_dependency_rejected():
    graph = LockGraph(2)
    graph.add_dep(0, 1)
    with pytest.raises(LockGraphError):
        graph.add_dep(0, 1)
    with pytest.raises(LockGraphError):
        graph.add_dep_mutual(1, 0)


def test_out_of_range_indices():
    graph = LockGraph(2)
    with pytest.raises(IndexError):
        graph.add_dep(2, 0)
    with pytest.raises(IndexError):
        graph.add_dep(0, 5)
    with pytest.raises(IndexError):
        graph.add_dep_mutual(-1, 0)
    graph.commit()
    with pytest.raises(IndexError):
        graph.lock(2)
    with pytest.raises(IndexError):
        graph.unlock(3)


def test_commit_state_enforced():
    graph = LockGraph(2)
    with pytest.raises(LockGraphError):
        graph.lock(0)
    with pytest.raises(LockGraphError):
        graph.unlock(0)
    graph.commit()
    assert graph.committed is True
    with pytest.raises(LockGraphError):
        graph.commit()
    with pytest.raises(LockGraphError):
        graph.add_dep(0, 1)
    with pytest.raises(LockGraphError):
        graph.add_dep_mutual(0, 1)


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        LockGraph(-1)


def test_lock_waits_for_unlock():
    graph = committed_graph(2, mutual=[(0, 1)])
    graph.lock(0)
    acquired = threading.Event()

    def worker():
        graph.lock(1)
        acquired.set()

    thread = threading.Thread(target=worker)
    thread.start()
    assert acquired.wait(0.2) is False
    graph.unlock(0)
    assert acquired.wait(5) is True
    thread.join(5)
    assert graph.locked(0) is True
    graph.unlock(1)
    assert graph.locked(0) is False


def test_independent_blocks_lock_concurrently():
    graph = committed_graph(4, mutual=[(0, 1), (2, 3)])
    counter = []
    lock = threading.Lock()

    def worker(block):
        for _ in range(200):
            graph.lock(block)
            with lock:
                counter.append(block)
            graph.unlock(block)

    threads = [threading.Thread(target=worker, args=(b,)) for b in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(10)
    assert len(counter) == 800
    assert all(graph.locked(b) is False for b in range(4))