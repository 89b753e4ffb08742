"""Campus Portal Application Package — REST backend for events, clubs and notifications.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
