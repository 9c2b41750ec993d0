"""Unit tests for the session cache."""

from dbfacade.database.session_cache import SessionCache


class TestSessionCache:
    """Test cases for SessionCache."""

    def test_set_and_get(self):
        """Test storing and reading a value."""
        cache = SessionCache({}, server="localhost:3306", user="pma")

        cache.set("mysql_cur_user", "pma@localhost")

        assert cache.has("mysql_cur_user")
        assert cache.get("mysql_cur_user") == "pma@localhost"
        assert cache.get("missing", "default") == "default"

    def test_false_values_are_cached(self):
        """Test falsy values still count as present."""
        cache = SessionCache({})

        cache.set("is_amazon_rds", False)

        assert cache.has("is_amazon_rds")
        assert cache.get("is_amazon_rds") is False

    def test_scopes_are_isolated(self):
        """Test two logins sharing storage never see each other's entries."""
        storage = {}
        first = SessionCache(storage, server="db1", user="alice")
        second = SessionCache(storage, server="db1", user="bob")

        first.set("mysql_cur_user", "alice@%")

        assert not second.has("mysql_cur_user")
        assert storage["cache"]["server_db1/alice"] == {"mysql_cur_user": "alice@%"}

    def test_get_or_compute(self):
        """Test the value is computed once."""
        cache = SessionCache({})
        calls = []

        def compute():
            calls.append(1)
            return None

        assert cache.get_or_compute("value", compute) is None
        assert cache.get_or_compute("value", compute) is None
        assert len(calls) == 1

    def test_remove_and_clear(self):
        """Test removal of one key and of the whole scope."""
        cache = SessionCache({})
        cache.set("a", 1)
        cache.set("b", 2)

        cache.remove("a")
        cache.remove("never-set")
        assert not cache.has("a")
        assert cache.has("b")

        cache.clear()
        assert not cache.has("b")

    def test_empty_storage(self):
        """Test reads on untouched storage."""
        storage = {}
        cache = SessionCache(storage)

        assert cache.has("x") is False
        cache.remove("x")
        cache.clear()
        assert storage == {}
