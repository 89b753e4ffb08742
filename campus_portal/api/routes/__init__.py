"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Mutating routes authenticate first, then authorize by role or ownership
"""
