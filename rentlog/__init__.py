"""
RentLog - Source Package

A local record keeper for landlords: properties, tenants, rent bills
and payments, all kept in one JSON data file chosen by the user.

DESIGN PRINCIPLES:
1. The user's file is the only storage; nothing leaves the machine
2. A cancelled or failed open/save never loses in-memory edits
3. Old data files keep opening; missing fields are filled, never rejected
4. Every step is auditable
5. File access is swappable (file handles or upload/download)
"""

__version__ = "1.0.0"
__author__ = "RentLog Team"
