"""
Expense Ledger - Source Package

A small personal expense ledger: record what you spend, then look at it
by week, by month or all at once, with totals per category.

DESIGN PRINCIPLES:
1. The store is the single source of truth
2. Derived views are recomputed, never patched
3. Bad input is refused, not corrected
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Ledger Team"
