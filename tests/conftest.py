"""Pytest configuration and shared fixtures.

This module provides pytest configuration and shared fixtures for all tests
in the dbfacade test suite, most importantly ``DbiDummy``: a driver adapter
answering scripted results for exact SQL strings.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import pytest
import structlog

from dbfacade.config.models import ConnectionParams, ServerConfig, Settings
from dbfacade.database.base import DbiExtension, Statement
from dbfacade.database.interface import DatabaseInterface, reset_instance
from dbfacade.database.models import BufferedResult, ConnectionType
from dbfacade.database.session_cache import SessionCache

# Configure test logging to suppress noise during tests
structlog.configure(
    processors=[structlog.testing.LogCapture()],
    wrapper_class=structlog.BoundLogger,
    logger_factory=structlog.testing.ReturnLoggerFactory(),
    cache_logger_on_first_use=False,
)


ScriptedResult = Union[bool, Sequence[Sequence[Any]]]


class DummyLink:
    """Stand-in for a driver connection."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"DummyLink({self.name!r})"


class DbiDummy(DbiExtension):
    """Driver adapter double.

    Every expected statement is registered with ``add_result`` and answered
    once, in registration order for identical SQL. ``select_db`` calls must
    match ``add_select_db`` registrations in order. Unexpected statements
    fail the test.
    """

    def __init__(self) -> None:
        self._results: Dict[str, List[Tuple[ScriptedResult, List[str]]]] = defaultdict(list)
        self._select_db: List[str] = []
        self.executed: List[str] = []
        self.query_links: List[Any] = []
        self.selected: List[str] = []
        self.prepared: List[Tuple[Any, str]] = []
        self.closed: List[Any] = []
        self.connect_params: List[ConnectionParams] = []
        self.connect_results: List[Optional[Any]] = []
        self.connect_error: Tuple[int, str] = (0, "")
        self.errors: Dict[int, Tuple[int, str]] = {}
        self.next_error: Tuple[int, str] = (1064, "You have an error in your SQL syntax")
        self.affected = 0

    def add_result(
        self,
        query: str,
        result: ScriptedResult,
        columns: Optional[Sequence[str]] = None,
    ) -> None:
        self._results[query].append((result, list(columns or [])))

    def add_select_db(self, database: str) -> None:
        self._select_db.append(database)

    def assert_all_queries_consumed(self) -> None:
        remaining = [query for query, results in self._results.items() if results]
        assert remaining == [], f"Scripted queries were not executed: {remaining}"
        assert self._select_db == [], f"Expected select_db calls missing: {self._select_db}"

    def connect(self, params: ConnectionParams) -> Optional[Any]:
        self.connect_params.append(params)
        if self.connect_results:
            return self.connect_results.pop(0)
        return DummyLink(params.user)

    def select_db(self, database: str, link: Any) -> bool:
        assert self._select_db, f"Unexpected select_db({database!r})"
        expected = self._select_db.pop(0)
        assert database == expected, f"select_db({database!r}), expected {expected!r}"
        self.selected.append(database)
        return True

    def real_query(self, query: str, link: Any, unbuffered: bool = False) -> Union[BufferedResult, bool]:
        self.executed.append(query)
        self.query_links.append(link)
        scripted = self._results.get(query)
        assert scripted, f"Unexpected query: {query}"
        result, columns = scripted.pop(0)

        if result is False:
            self.errors[id(link)] = self.next_error
            return False
        self.errors.pop(id(link), None)
        if result is True:
            return True

        rows = [tuple(row) for row in result]
        if not columns and rows:
            columns = [str(index) for index in range(len(rows[0]))]
        self.affected = len(rows)
        return BufferedResult(columns, rows, affected_rows=len(rows))

    def prepare(self, link: Any, query: str) -> Optional[Statement]:
        self.prepared.append((link, query))
        return None

    def get_error(self, link: Any) -> str:
        if link is None:
            return self.connect_error[1]
        return self.errors.get(id(link), (0, ""))[1]

    def get_error_number(self, link: Any) -> int:
        if link is None:
            return self.connect_error[0]
        return self.errors.get(id(link), (0, ""))[0]

    def affected_rows(self, link: Any) -> int:
        return self.affected

    def escape_string(self, link: Any, value: str) -> str:
        return value.replace("\\", "\\\\").replace("'", "\\'")

    def close(self, link: Any) -> None:
        self.closed.append(link)


@pytest.fixture(autouse=True)
def _reset_global_facade():
    """Keep the process-wide facade from leaking between tests."""
    reset_instance()
    yield
    reset_instance()


@pytest.fixture
def dbi_dummy() -> DbiDummy:
    return DbiDummy()


@pytest.fixture
def make_dbi(dbi_dummy: DbiDummy) -> Callable[..., DatabaseInterface]:
    """Build a facade over ``dbi_dummy`` with all three roles connected.

    Keyword arguments become ``Settings``; ``server`` may be a mapping of
    ``ServerConfig`` fields.
    """

    def factory(**settings_data: Any) -> DatabaseInterface:
        server = settings_data.pop("server", {})
        settings = Settings(server=ServerConfig(**server), **settings_data)
        dbi = DatabaseInterface(dbi_dummy, settings, SessionCache({}, server="test", user="pma"))
        for role in ConnectionType:
            dbi.set_link(role, DummyLink(role.name.lower()))
        return dbi

    return factory


@pytest.fixture
def dbi(make_dbi: Callable[..., DatabaseInterface]) -> DatabaseInterface:
    return make_dbi()


@pytest.fixture
def table_status_columns() -> List[str]:
    """Columns of SHOW TABLE STATUS in server order."""
    return [
        "Name",
        "Engine",
        "Version",
        "Row_format",
        "Rows",
        "Avg_row_length",
        "Data_length",
        "Max_data_length",
        "Index_length",
        "Data_free",
        "Auto_increment",
        "Create_time",
        "Update_time",
        "Check_time",
        "Collation",
        "Checksum",
        "Create_options",
        "Comment",
    ]
