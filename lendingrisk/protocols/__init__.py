"""Protocol-specific implementations.

Currently supported:
- Aave v3 (lendingrisk.protocols.aave)
"""
