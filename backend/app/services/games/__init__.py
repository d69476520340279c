"""Game domain services: state model, state machine, plays and sync.

This package contains pure(ish) domain logic that should be imported by
HTTP routes, keeping transport concerns separated from core game
mechanics. ``state``, ``machine``, ``plays`` and ``summary`` never touch
the database; ``store``, ``sync`` and ``session`` need an app context.
"""
