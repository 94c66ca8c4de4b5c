"""Notifications app package.

Outgoing email for the scheduling core. Delivery is best-effort: the
senders log failures and report them as a boolean instead of raising.
"""
