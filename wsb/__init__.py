"""
WSB: work breakdown structure tracking with earned value management.
"""

__version__ = "0.1.0"
