"""Users app package.

Defines the custom user model used as AUTH_USER_MODEL. Users are the
parties to invites, holds and bookings; the scheduling core treats them
as read-only.
"""
