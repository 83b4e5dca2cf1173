# lockpick

Small building blocks for tree, allocation and concurrency work:

- `lockpick.rb_tree`: intrusive red-black tree nodes (`RBNode`, `Color`),
  the rotations `rotate_left` and `rotate_right`, and `insert_rebalance`, which
  restores the red-black properties after a node has been linked in as a leaf
  and returns the new root.
- `lockpick.rb_remove`: `remove(root, node)`, which unlinks a node and
  rebalances, returning the new root or `None`. It also has
  `check_consistency(root)`, which checks parent links, red-red violations and
  black heights.
- `lockpick.ordered_set`: `OrderedSet`, a set ordered by a user-supplied
  "less than" function. Two elements are equal when neither is less than the
  other. It has `add`, `get`, `find_entry`, `remove`, `first`, `last`, `in`,
  `len`, forward and reversed iteration. `SetEntry` cursors step with `next()`
  and `prev()`.
- `lockpick.slab`: `Slab`, a fixed-capacity allocator of slot indices. `alloc()`
  always takes the lowest free slot, `free(index)` merges it back into the free
  blocks, and `free_blocks()` lists those blocks as `(base, size)` pairs.
  Allocated slots hold values (`slab[i] = value`). Iterating yields the
  allocated indices in order. `SlabFullError` is raised when nothing is free.
- `lockpick.spinlock_bitset`: `SpinlockBitset`, many non-reentrant locks
  addressed by index, with `lock`, `unlock`, `trylock` and `is_locked`.
- `lockpick.lock_graph`: `LockGraph`. Dependencies between blocks are declared
  and then frozen with `commit()`. Locking a block waits until no locked block
  holds it off, then holds off each of its lockees until it is unlocked.
  Misuse raises `LockGraphError`.
- `lockpick.visit_table`: `VisitTable`, a fixed-capacity (power of two),
  thread-safe, insert-only hash table with linear probing for "have I seen
  this?" checks. `VisitTableFullError` is raised when no bucket is free.
- `lockpick.reporter`: `TestSession`, a tree-shaped test progress reporter,
  plus the helpers `format_stats` and `create_padding`.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

An ordered set:

```python
from lockpick.ordered_set import OrderedSet

s = OrderedSet(lambda a, b: a < b)
for x in (5, 1, 3):
    s.add(x)              # returns (entry, inserted)

print(list(s))            # [1, 3, 5]
print(3 in s, len(s))     # True 3
s.remove(3)
print(s.first().data, s.last().data)   # 1 5
```

A slab of slots:

```python
from lockpick.slab import Slab

slab = Slab(4)
a = slab.alloc()          # 0
b = slab.alloc()          # 1
slab[a] = "first"
slab.free(b)
print(len(slab))          # 1 slot in use
print(slab.free_blocks()) # [(1, 3)]
```

A lock graph:

```python
from lockpick.lock_graph import LockGraph

graph = LockGraph(3)
graph.add_dep_mutual(0, 1)
graph.commit()

graph.lock(0)             # locking 1 now waits until 0 is unlocked
print(graph.locked(1))    # True
graph.unlock(0)
```

A visit table:

```python
from lockpick.visit_table import VisitTable

table = VisitTable.from_max_elements(100, hash, lambda a, b: a == b)
print(table.insert("node-1"))   # True: newly inserted
print(table.insert("node-1"))   # False: already present
print("node-1" in table)        # True
```

A test session:

```python
import sys
from lockpick.reporter import TestSession

session = TestSession("demo", sys.stdout)

def check():
    session.pass_case()

session.run("check()", check, 8)   # True; an AssertionError counts as a failure
failures = session.end()           # number of failed tests
```

## What is not included

`lockpick` is a library only. It has no command-line program. `TestSession.end()`
returns the failure count and does not exit the process. The reporter does
not find or collect tests by itself: you call `run`, or `enter` and `leave`,
for each test.