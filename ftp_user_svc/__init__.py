"""
FTP user service data layer.

Stores FTP account credentials and the mappings between external billing
system identifiers and those accounts, on MySQL or PostgreSQL.
"""

__version__ = "1.0.0"
