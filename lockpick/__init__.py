"""Red-black trees, ordered sets, slabs, lock graphs, visit tables and a test reporter."""

__version__ = "0.1.0"

__all__ = [
    "rb_tree",
    "rb_remove",
    "spinlock_bitset",
    "lock_graph",
    "ordered_set",
    "visit_table",
    "slab",
    "reporter",
]