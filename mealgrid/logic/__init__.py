"""Core business logic layer.

Subpackages:
- grid: slot index and the week grid state machine (drag/drop, copy/paste, edit, delete)
- sharing: role rules and invite codes for shared meal plans
"""
__all__ = ["grid", "sharing"]
