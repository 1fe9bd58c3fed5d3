"""
File Type Keyword Learning - Source Package

Main modules:
- database: SQLAlchemy ORM models, repositories and transaction scopes
- learning: correction pattern mining and the learning event log
- utils: configuration management
"""

__version__ = "1.0.0"
