"""Transactions, two-phase lock management and the transaction manager."""