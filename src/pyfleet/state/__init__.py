"""State/store layer.

This package is the single source of truth for tracked vehicles: the entity
store and the reconciler that merges each incoming snapshot into it.
"""
