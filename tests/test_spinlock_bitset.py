import threading

import pytest

from lockpick.spinlock_bitset import SpinlockBitset


def test_lock_and_unlock():
    spins = SpinlockBitset(40)
    spins.lock(33)
    assert spins.is_locked(33)
    assert not spins.is_locked(32)
    spins.unlock(33)
    assert not spins.is_locked(33)


def test_trylock_busy_then_free():
    spins = SpinlockBitset(8)
    assert spins.trylock(3) is True
    assert spins.trylock(3) is False
    spins.unlock(3)
    assert spins.trylock(3) is True


def test_locks_are_independent():
    spins = SpinlockBitset(64)
    for index in range(0, 64, 2):
        spins.lock(index)
    assert [spins.is_locked(i) for i in range(64)] == [i % 2 == 0 for i in range(64)]


def test_unlock_not_locked_raises():
    spins = SpinlockBitset(4)
    with pytest.raises(RuntimeError):
        spins.unlock(1)


@pytest.mark.parametrize("index", [-1, 4, 100])
def test_index_out_of_range(index):
    spins = SpinlockBitset(4)
    with pytest.raises(IndexError):
        spins.lock(index)
    with pytest.raises(IndexError):
        spins.trylock(index)
    with pytest.raises(IndexError):
        spins.unlock(index)


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        SpinlockBitset(-1)


def test_len_is_number_of_locks():
    assert len(SpinlockBitset(17)) == 17


def test_lock_waits_for_release():
    spins = SpinlockBitset(2)
    spins.lock(0)
    acquired = threading.Event()

    def worker():
        spins.lock(0)
        acquired.set()

    thread = threading.Thread(target=worker)
    thread.start()
    assert not acquired.wait(0.1)
    spins.unlock(0)
    assert acquired.wait(5)
    thread.join(5)
    assert spins.is_locked(0)


def test_mutual_exclusion_counter():
    spins = SpinlockBitset(1)
    counter = {"value": 0}
    threads_num, iterations = 4, 500

    def worker():
        for _ in range(iterations):
            spins.lock(0)
            current = counter["value"]
            counter["value"] = current + 1
            spins.unlock(0)

    threads = [threading.Thread(target=worker) for _ in range(threads_num)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(10)
    assert counter["value"] == threads_num * iterations
    assert not spins.is_locked(0)