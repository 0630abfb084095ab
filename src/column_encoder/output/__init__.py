"""
Output modules for the Column Encoder.

This package contains output handling:
- report: Mapping report generator
"""
