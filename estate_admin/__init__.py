"""
Estate Admin: review panels for subsequent payments and plot registrations.
"""

__version__ = "0.1.0"
