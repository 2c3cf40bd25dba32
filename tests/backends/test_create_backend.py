import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError

from post_editor.backends import post_editor
from post_editor.backends.post_editor import LOGIN_FORM, PostEditorBackend, create
from post_editor.errors import DatabaseConnectionError


class FakeConnection:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeEngine:
    def __init__(self, fail=False):
        self.fail = fail
        self.disposed = False

    def connect(self):
        if self.fail:
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))
        return FakeConnection()

    def dispose(self):
        self.disposed = True


@pytest.fixture
def captured(monkeypatch):
    calls = {}

    def fake_build_engine(url, **kwargs):
        calls["url"] = url
        calls["kwargs"] = kwargs
        return calls.setdefault("engine", FakeEngine())

    monkeypatch.setattr(post_editor, "build_engine", fake_build_engine)
    return calls


def test_create_applies_host_and_port_defaults(captured):
    backend = create(
        {"username": "blog", "password": "pw", "host": "", "port": ""},
        driver="mysql+pymysql",
        database="",
    )

    assert isinstance(backend, PostEditorBackend)
    assert captured["url"] == "mysql+pymysql://blog:pw@127.0.0.1:3306/"


def test_create_uses_explicit_connection_params(captured):
    create(
        {"username": "u@x", "password": "p:w/d", "host": "db", "port": "3307"},
        driver="mysql+pymysql",
        database="blog",
        query_timeout=7,
        pool_size=2,
    )

    assert captured["url"] == "mysql+pymysql://u%40x:p%3Aw%2Fd@db:3307/blog"
    assert captured["kwargs"] == {"query_timeout": 7, "pool_size": 2}


def test_create_rejects_missing_username(captured):
    with pytest.raises(DatabaseConnectionError):
        create({"password": "pw"})
    assert "url" not in captured


def test_create_rejects_unknown_parameters(captured):
    with pytest.raises(DatabaseConnectionError):
        create({"username": "u", "database": "other"})


def test_create_fails_when_database_unreachable(monkeypatch):
    engine = FakeEngine(fail=True)
    monkeypatch.setattr(post_editor, "build_engine", lambda url, **kw: engine)

    with pytest.raises(DatabaseConnectionError) as exc_info:
        create({"username": "u"})

    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert engine.disposed is True


def test_create_returns_working_backend(monkeypatch, tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'posts.db'}", future=True)
    monkeypatch.setattr(post_editor, "build_engine", lambda url, **kw: engine)

    backend = create({"username": "u"})

    assert backend.engine is engine
    assert engine.pool.checkedout() == 0
    backend.close()


def test_login_form_declares_connection_fields():
    fields = {element.name: element for element in LOGIN_FORM}

    assert list(fields) == ["host", "port", "username", "password"]
    assert fields["host"].default == "127.0.0.1"
    assert fields["port"].type == "number"
    assert fields["port"].default == 3306
    assert fields["password"].type == "password"
    assert fields["username"].required is True
    assert fields["host"].required is False
