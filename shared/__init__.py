"""
Shared Kernel

Value objects used by every app of the scheduling core: money and
wall-clock time ranges.
"""
