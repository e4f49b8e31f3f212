"""
Affiliate Empire - FTC disclosure compliance and resilient provider clients.
"""

__version__ = "1.0.0"
