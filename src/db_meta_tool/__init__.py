"""
DbMetaTool - Firebird schema synchronizer.

Builds a database from a directory of SQL definition scripts, exports an
existing database's domains, tables and stored procedures back into scripts,
and applies scripts as incremental updates to a live database.
"""

__version__ = "0.1.0"
