"""Face attendance kiosk backend.

This package is organized by feature modules (descriptors, enrollment,
matching, ledger, identification) with a thin Flask controller layer on top
of plain service/repository classes.
"""
