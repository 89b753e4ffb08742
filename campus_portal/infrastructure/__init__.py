"""Infrastructure Layer — database sessions, logging, identity-provider boundary.

Invariants:
    - Only this layer talks to external systems (database, identity provider)
    - External failures are mapped to core/errors.py types before leaving the layer
"""
