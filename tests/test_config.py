# tests/test_config.py

import pytest
from pydantic import ValidationError

from agealchemy.config import AGEConfig


class TestAGEConfig:
    def test_defaults(self):
        config = AGEConfig()
        assert config.host == "localhost"
        assert config.port == 5432
        assert config.database == "postgres"
        assert config.graph_name == "default_graph"
        assert config.auto_create_graph is True

    def test_invalid_graph_name(self):
        with pytest.raises(ValidationError):
            AGEConfig(graph_name="bad-name")
        with pytest.raises(ValidationError):
            AGEConfig(graph_name="x'); DROP TABLE t; --")
        with pytest.raises(ValidationError):
            AGEConfig(graph_name="g\n")

    def test_invalid_port(self):
        with pytest.raises(ValidationError):
            AGEConfig(port=0)

    def test_unknown_field(self):
        with pytest.raises(ValidationError):
            AGEConfig(hostname="db")

    def test_validate_assignment(self):
        config = AGEConfig()
        with pytest.raises(ValidationError):
            config.graph_name = "1graph"

    def test_password_hidden_from_repr(self):
        assert "s3cret" not in repr(AGEConfig(password="s3cret"))


class TestFromEnv:
    def test_reads_environment(self):
        env = {
            "DB_HOST": "db.internal",
            "DB_PORT": "6543",
            "DB_NAME": "social",
            "DB_USER": "app",
            "DB_PASSWORD": "pw",
            "GRAPH_NAME": "social_graph",
        }
        config = AGEConfig.from_env(env)
        assert config.host == "db.internal"
        assert config.port == 6543
        assert config.database == "social"
        assert config.user == "app"
        assert config.password == "pw"
        assert config.graph_name == "social_graph"

    def test_defaults_for_missing_variables(self):
        assert AGEConfig.from_env({}) == AGEConfig()

    def test_overrides_win(self):
        config = AGEConfig.from_env({"GRAPH_NAME": "from_env"}, graph_name="override")
        assert config.graph_name == "override"

    def test_os_environ(self, monkeypatch):
        monkeypatch.setenv("GRAPH_NAME", "env_graph")
        assert AGEConfig.from_env().graph_name == "env_graph"


class TestConninfo:
    def test_conninfo(self):
        conninfo = AGEConfig(host="h", port=1234, database="d", user="u").conninfo
        assert "host=h" in conninfo
        assert "port=1234" in conninfo
        assert "dbname=d" in conninfo
        assert "user=u" in conninfo
        assert "password" not in conninfo

    def test_password_and_timeout(self):
        conninfo = AGEConfig(password="pw", connect_timeout=5).conninfo
        assert "password=pw" in conninfo
        assert "connect_timeout=5" in conninfo
