"""SQL execution against SQL Server."""

from .sql_driver import DbConnPool
from .sql_driver import RowResult
from .sql_driver import SqlDriver
from .sql_driver import obfuscate_password

__all__ = ["DbConnPool", "RowResult", "SqlDriver", "obfuscate_password"]
