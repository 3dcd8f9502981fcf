"""
Kiosk Check-In Backend

Creates RepairShopr tickets from kiosk check-ins and proxies chat
completions while keeping provider credentials server-side.
"""

__version__ = "1.0.0"
