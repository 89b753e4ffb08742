"""Services Layer — imperative shell: DB orchestration around core rules.

Invariants:
    - Services own commits; routes call services and shape responses
    - Core decisions (transitions, authorization) are delegated to core/
"""
