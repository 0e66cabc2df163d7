"""
Walletbook - Source Package

A personal finance tracker backend: wallets, categories and
income/expense transactions stored in a per-user document store,
with wallet balances maintained as transactions change.

DESIGN PRINCIPLES:
1. Wallet balances only move through the ledger
2. Reports are pure functions over a snapshot
3. Missing references degrade to placeholders, never crash
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Walletbook Team"
