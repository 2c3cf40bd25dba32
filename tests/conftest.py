import io
import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from post_editor.backends.post_editor import PostEditorBackend
from post_editor.db.base import Base
from post_editor.models.post import Post
from post_editor.schemas.fs import Metadata


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so the engine uses a real QueuePool."""
    engine = create_engine(f"sqlite:///{tmp_path / 'posts.db'}", future=True)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def backend(engine):
    backend = PostEditorBackend(engine)
    yield backend
    backend.close()


def seed_posts(engine, *rows: dict) -> None:
    with Session(engine) as db:
        db.add_all([Post(**row) for row in rows])
        db.commit()


def fetch_post(engine, lang: str, slug: str):
    with Session(engine) as db:
        post = db.get(Post, (lang, slug))
        if post is not None:
            db.expunge(post)
        return post


def save_body(title="", description="", content="") -> io.BytesIO:
    payload = {
        "title": {"value": title},
        "description": {"value": description},
        "content": {"value": content},
    }
    return io.BytesIO(json.dumps(payload).encode("utf-8"))


class FakeBackend:
    """
    Minimal backend stand-in for router tests.
    Set raises={"method": exc} to make a method fail.
    """

    def __init__(self, entries=None, read_return=b"{}", raises=None):
        self.entries = entries or []
        self.read_return = read_return
        self.raises = raises or {}
        self.calls = []
        self.closed = False

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name in self.raises:
            raise self.raises[name]

    def list_dir(self, path):
        self._record("list_dir", path)
        return self.entries

    def read(self, path):
        self._record("read", path)
        return io.BytesIO(self.read_return)

    def write(self, path, stream):
        self._record("write", path, stream.read())

    def create_file(self, path):
        self._record("create_file", path)

    def delete(self, path):
        self._record("delete", path)

    def create_directory(self, path):
        self._record("create_directory", path)

    def move(self, src, dst):
        self._record("move", src, dst)

    def metadata(self, path):
        self._record("metadata", path)
        return Metadata(can_create_file=True)

    def close(self):
        self.closed = True
