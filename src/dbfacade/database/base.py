from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence, Union

from dbfacade.config.models import ConnectionParams
from dbfacade.database.models import BufferedResult


class Statement(ABC):
    """Prepared statement bound to one driver connection."""

    @abstractmethod
    def execute(self, params: Optional[Sequence[Any]] = None) -> bool:
        """Run the statement with positional parameters. Return success."""
        pass

    @abstractmethod
    def get_result(self) -> Union[BufferedResult, bool]:
        """Return the result of the last execution, or False."""
        pass


class DbiExtension(ABC):
    """
    Driver adapter contract used by the facade.
    Methods report failure by returning None/False and leave the details
    to get_error/get_error_number for the same link.
    """

    @abstractmethod
    def connect(self, params: ConnectionParams) -> Optional[Any]:
        """Open a connection and return an opaque link, or None on failure."""
        pass

    @abstractmethod
    def select_db(self, database: str, link: Any) -> bool:
        pass

    @abstractmethod
    def real_query(self, query: str, link: Any, unbuffered: bool = False) -> Union[BufferedResult, bool]:
        """Run a statement. Return a result for row-returning statements,
        True for the others, False on failure."""
        pass

    @abstractmethod
    def prepare(self, link: Any, query: str) -> Optional[Statement]:
        pass

    @abstractmethod
    def get_error(self, link: Any) -> str:
        """Return the message of the last failure on the link, or ''."""
        pass

    @abstractmethod
    def get_error_number(self, link: Any) -> int:
        """Return the server error number of the last failure on the link, or 0."""
        pass

    @abstractmethod
    def affected_rows(self, link: Any) -> int:
        pass

    @abstractmethod
    def escape_string(self, link: Any, value: str) -> str:
        pass

    @abstractmethod
    def close(self, link: Any) -> None:
        pass
