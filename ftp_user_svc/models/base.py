"""
Declarative base for the ftp_user_svc tables.

The repositories issue hand-written SQL; these classes describe the schema
so it can be created identically on MySQL, PostgreSQL and SQLite (tests).
"""

from sqlalchemy.orm import declarative_base


# SQLAlchemy declarative base for all table models
Base = declarative_base()
