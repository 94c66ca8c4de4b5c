"""Venues app package.

Venues are the physical places where meetings happen. The scheduling
core reads their operating hours; venue CRUD lives elsewhere.
"""
