"""
Contract Key Dates

Recurrence and key-date computation for contract agreements. Derives term
ends, auto-renewal occurrences and notice deadlines within a bounded window,
and projects them into agenda, month grid, calendar feed and reminder views.
"""

__version__ = "1.0.0"
__author__ = "Contract Key Dates Team"
