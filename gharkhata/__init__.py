"""
GharKhata - Household Bookkeeping

Tracks domestic helpers, their attendance, milk deliveries and the
salary/milk payments made against them, and derives a monthly statement
of what is owed.

DESIGN PRINCIPLES:
1. One aggregation engine, every view consumes it
2. The active profile is always passed explicitly
3. Bad numbers in old records read as zero; bad new entries are rejected
4. Nothing is cached - every statement re-reads the ledgers
"""

__version__ = "1.0.0"
__author__ = "GharKhata Team"
