"""
Pemo → Qoyod export sync.

A scheduled job that fetches Pemo expense transactions awaiting export,
books each one in Qoyod as an invoice or journal entry, and marks the
booked transactions as exported in Pemo.
"""

__version__ = "0.1.0"
