"""Infrastructure Layer — database, reporters, notifier, actor resolution, logging.

Invariants:
    - Every module here implements a core/ protocol or wires one up
    - External configuration errors surface at construction time
"""
