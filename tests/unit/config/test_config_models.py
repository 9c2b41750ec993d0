"""Unit tests for configuration models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from dbfacade.config.models import ConnectionParams, LoggingConfig, ServerConfig, Settings
from dbfacade.core.exceptions import ConfigurationError, ErrorCodes, ValidationError
from dbfacade.database.models import ConnectionType


class TestServerConfig:
    """Test cases for the server configuration."""

    def test_defaults(self):
        """Test default values."""
        server = ServerConfig()

        assert server.host == "localhost"
        assert server.port == 3306
        assert server.disable_is is False
        assert server.only_db == []
        assert server.has_control_user is False

    def test_invalid_port(self):
        """Test out of range ports raise the package error."""
        with pytest.raises(ValidationError) as exc_info:
            ServerConfig(port=70000)

        assert exc_info.value.code == ErrorCodes.CONFIG_VALIDATION_FAILED

    def test_invalid_hide_db(self):
        """Test hide_db must compile."""
        with pytest.raises(ValidationError):
            ServerConfig(hide_db="(unclosed")

    def test_single_only_db_pattern(self):
        """Test a single pattern is accepted as a string."""
        assert ServerConfig(only_db="db%").only_db == ["db%"]
        assert ServerConfig(only_db="").only_db == []

    def test_unknown_field_rejected(self):
        """Test extra fields are forbidden."""
        with pytest.raises(PydanticValidationError):
            ServerConfig(hostname="db.local")

    def test_user_connection_params(self):
        """Test the user role uses the login credentials."""
        server = ServerConfig(host="db.local", port=3307, user="pma", password="secret", control_user="ctl")

        params = server.connection_params(ConnectionType.USER)

        assert isinstance(params, ConnectionParams)
        assert (params.host, params.port, params.user) == ("db.local", 3307, "pma")
        assert params.password.get_secret_value() == "secret"

    def test_control_connection_params(self):
        """Test control credentials and host/port overrides."""
        server = ServerConfig(
            socket="/run/mysqld/mysqld.sock",
            user="pma",
            control_user="ctl",
            control_pass="ctlpass",
            control_host="ctl.local",
            control_port=3310,
        )

        params = server.connection_params(ConnectionType.CONTROL_USER)

        assert params.user == "ctl"
        assert params.password.get_secret_value() == "ctlpass"
        assert params.host == "ctl.local"
        assert params.port == 3310
        assert params.socket is None

    def test_auxiliary_uses_login(self):
        """Test the auxiliary role shares the login credentials."""
        server = ServerConfig(user="pma", control_user="ctl")

        assert server.connection_params(ConnectionType.AUXILIARY).user == "pma"

    def test_environment_variables(self, monkeypatch):
        """Test ${VAR} and ${VAR:default} resolution."""
        monkeypatch.setenv("DBFACADE_HOST", "env.local")

        server = ServerConfig(host="${DBFACADE_HOST}", user="${DBFACADE_MISSING:guest}")

        assert server.host == "env.local"
        assert server.user == "guest"

    def test_to_dict_masks_secrets(self):
        """Test secrets are masked unless asked otherwise."""
        server = ServerConfig(password="secret")

        assert server.to_dict()["password"] == "***MASKED***"
        assert server.to_dict(mask_secrets=False)["password"] == "secret"


class TestSettings:
    """Test cases for top level settings."""

    def test_defaults(self):
        """Test default values."""
        settings = Settings()

        assert settings.natural_order is True
        assert settings.mysql_locale is None
        assert settings.debug.sql is False
        assert settings.logging.level == "INFO"

    @pytest.mark.parametrize("locale, expected", [("en_US", "en_US"), ("", None), (None, None)])
    def test_locale(self, locale, expected):
        """Test accepted locales."""
        assert Settings(mysql_locale=locale).mysql_locale == expected

    def test_locale_rejects_sql(self):
        """Test locales that are not identifiers are rejected."""
        with pytest.raises(ValidationError):
            Settings(mysql_locale="en'; DROP DATABASE x; --")

    def test_from_dict(self):
        """Test building from nested mappings."""
        settings = Settings.from_dict(
            {"server": {"host": "db.local", "disable_is": True}, "debug": {"sql": True}}
        )

        assert settings.server.host == "db.local"
        assert settings.server.disable_is is True
        assert settings.debug.sql is True

    def test_from_file(self, tmp_path):
        """Test loading settings from YAML."""
        path = tmp_path / "dbfacade.yaml"
        path.write_text(
            "natural_order: false\n"
            "server:\n"
            "  host: db.local\n"
            "  only_db:\n"
            "    - shop%\n"
            "logging:\n"
            "  level: debug\n",
            encoding="utf-8",
        )

        settings = Settings.from_file(path)

        assert settings.natural_order is False
        assert settings.server.only_db == ["shop%"]
        assert settings.logging.level == "DEBUG"

    def test_from_missing_file(self, tmp_path):
        """Test a missing file raises a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            Settings.from_file(tmp_path / "missing.yaml")

        assert exc_info.value.code == ErrorCodes.CONFIG_NOT_FOUND

    def test_from_file_not_a_mapping(self, tmp_path):
        """Test a YAML list is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            Settings.from_file(path)

        assert exc_info.value.code == ErrorCodes.CONFIG_INVALID

    def test_validate_assignment(self):
        """Test assignments are validated."""
        settings = Settings()

        with pytest.raises(ValidationError):
            settings.server.port = 0


class TestLoggingConfig:
    """Test cases for the logging configuration."""

    def test_level_is_normalized(self):
        """Test lower case levels are accepted."""
        assert LoggingConfig(level="warning").level == "WARNING"

    def test_unknown_format(self):
        """Test unknown formats are rejected."""
        with pytest.raises(PydanticValidationError):
            LoggingConfig(format="xml")
