"""Finances app package.

Holds the per-user wallet balance. Top-ups arrive from the payment
processor outside this core; the scheduling services only read the
balance, debit fees and credit them back on compensation.
"""
