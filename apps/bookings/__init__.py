"""Bookings app package.

This app encapsulates the scheduling core: availability resolution
against both parties' commitments and external calendars, short-lived
venue holds, their confirmation into bookings and paid swaps. Venue
exclusivity is enforced by the booking store inside database
transactions.
"""
