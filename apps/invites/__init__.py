"""Invites app package.

Holds the two relationship sources between parties: social date
invites (separate date and time fields) and professional meeting
requests (single timestamp). Accepted records of either kind are the
commitments that make a party busy. The post-meeting check-in form
also lives here.
"""
