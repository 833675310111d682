"""
Persistence adapters and the generic resource store.

Stores depend on the StateStore protocol rather than on a concrete backend,
so the same ResourceStore runs against memory, JSON files or SQL.
"""
