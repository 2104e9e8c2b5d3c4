"""
Poultry Kernel - layer farm ledger and inventory state engine.

A record-keeping core for a poultry layer operation with:
- Immutable state snapshots threaded through pure engine functions
- A single cash ledger with derived borrowed amount
- Egg inventory kept in Peti (360 eggs) and feed stock kept in 50kg bags
- Whole-document persistence with explicit failure semantics
"""

__version__ = "0.1.0"
