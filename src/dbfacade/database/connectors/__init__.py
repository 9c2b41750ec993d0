"""Driver adapters for supported database servers."""

from .mysql import PyMySQLExtension, PyMySQLStatement

__all__ = ["PyMySQLExtension", "PyMySQLStatement"]
