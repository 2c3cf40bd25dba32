import datetime
import io
import json
import logging
from contextlib import contextmanager
from typing import IO, Any, Dict, Iterator, List, Mapping, Optional

from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from post_editor.db.base import build_engine, database_url, make_session_factory
from post_editor.errors import (
    DatabaseConnectionError,
    DecodeError,
    DuplicateKeyError,
    OperationNotAllowedError,
    QueryError,
)
from post_editor.models.post import Post
from post_editor.repos.posts_repo import PostsRepo
from post_editor.schemas.forms import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    BackendParams,
    FormElement,
    SavePayload,
)
from post_editor.schemas.fs import UNKNOWN_SIZE, Entry, Metadata
from post_editor.services.metadata_policy import metadata_for_path
from post_editor.services.path_codec import (
    POST_SUFFIX,
    parse_file_path,
    parse_path,
    require_post,
)
from post_editor.settings import settings

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

LOGIN_FORM: List[FormElement] = [
    FormElement(name="host", type="text", placeholder="Host", default=DEFAULT_HOST),
    FormElement(name="port", type="number", placeholder="Port", default=DEFAULT_PORT),
    FormElement(name="username", type="text", placeholder="Username", required=True),
    FormElement(name="password", type="password", placeholder="Password"),
]

# Fields exposed by read() and accepted by write(), with their form widget.
EDITABLE_FIELDS = (
    ("title", "text"),
    ("description", "text"),
    ("content", "long_text"),
)


class PostEditorBackend:
    """
    Posts table exposed as /{lang}/{slug}.md.

    Every operation checks a connection out of the engine pool for its own
    duration only and returns it on every exit path.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = make_session_factory(engine)
        self.closed = False

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self.closed:
            raise DatabaseConnectionError("backend is closed")

        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.debug(f"Query failed, rolled back: {e}")
            raise QueryError(str(e)) from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def list_dir(self, path: str) -> List[Entry]:
        address = parse_path(path)
        with self._session() as db:
            repo = PostsRepo(db)
            if address.is_root:
                return [
                    Entry(name=lang, type="directory")
                    for lang in repo.list_languages()
                ]
            return [
                Entry(
                    name=f"{slug}{POST_SUFFIX}",
                    type="file",
                    size=UNKNOWN_SIZE,
                    time=created_at_to_unix(created_at),
                )
                for slug, created_at in repo.list_slugs(address.language)
            ]

    def read(self, path: str) -> IO[bytes]:
        address = require_post(parse_file_path(path), path)
        with self._session() as db:
            post = PostsRepo(db).get_post(address.language, address.slug)
            form = post_form(post)
        return io.BytesIO(json.dumps(form).encode("utf-8"))

    def create_directory(self, path: str) -> None:
        raise OperationNotAllowedError("languages cannot be created directly")

    def delete(self, path: str) -> None:
        address = require_post(parse_file_path(path), path)
        with self._session() as db:
            deleted = PostsRepo(db).delete_post(address.language, address.slug)
        logger.info(f"Deleted {deleted} post(s) at {address.language}/{address.slug}")

    def move(self, src: str, dst: str) -> None:
        raise OperationNotAllowedError("posts cannot be moved or renamed")

    def create_file(self, path: str) -> None:
        address = require_post(parse_file_path(path), path)
        with self._session() as db:
            repo = PostsRepo(db)
            if repo.exists(address.language, address.slug):
                raise DuplicateKeyError(
                    f"post already exists: {address.language}/{address.slug}"
                )
            try:
                repo.insert_post(address.language, address.slug, _now())
            except IntegrityError as e:
                raise DuplicateKeyError(
                    f"post already exists: {address.language}/{address.slug}"
                ) from e
        logger.info(f"Created post {address.language}/{address.slug}")

    def write(self, path: str, stream: IO[bytes]) -> None:
        address = require_post(parse_file_path(path), path)
        payload = decode_payload(stream)
        with self._session() as db:
            updated = PostsRepo(db).publish_post(
                address.language,
                address.slug,
                title=payload.title.value or "",
                description=payload.description.value or "",
                content=payload.content.value or "",
                now=_now(),
            )
        if not updated:
            logger.warning(
                f"Save matched no post at {address.language}/{address.slug}"
            )
            return
        logger.info(f"Published post {address.language}/{address.slug}")

    def metadata(self, path: str) -> Metadata:
        return metadata_for_path(path)

    def close(self) -> None:
        if self.closed:
            return
        self.engine.dispose()
        self.closed = True
        logger.info("Post editor backend closed")


def create(
    config: Mapping[str, Any],
    *,
    driver: Optional[str] = None,
    database: Optional[str] = None,
    query_timeout: Optional[int] = None,
    pool_size: Optional[int] = None,
) -> PostEditorBackend:
    """Build a backend from login parameters and verify the database is reachable."""
    try:
        params = BackendParams.model_validate(dict(config))
    except ValidationError as e:
        raise DatabaseConnectionError(f"invalid backend configuration: {e}") from e

    url = database_url(
        driver or settings.DB_DRIVER,
        params.username,
        params.password,
        params.host,
        params.port,
        settings.DB_DATABASE if database is None else database,
    )
    engine = build_engine(
        url,
        query_timeout=query_timeout or settings.DB_QUERY_TIMEOUT,
        pool_size=pool_size or settings.DB_POOL_SIZE,
    )

    try:
        with engine.connect():
            pass
    except SQLAlchemyError as e:
        engine.dispose()
        logger.error(f"Cannot connect to {params.host}:{params.port}: {e}")
        raise DatabaseConnectionError(
            f"cannot connect to {params.host}:{params.port}"
        ) from e

    logger.info(f"Post editor backend connected to {params.host}:{params.port}")
    return PostEditorBackend(engine)


def post_form(post: Optional[Post]) -> Dict[str, dict]:
    form = {}
    for name, widget in EDITABLE_FIELDS:
        value = getattr(post, name, None) if post is not None else None
        element = FormElement(name=name, type=widget, value=value or "")
        form[name] = element.model_dump(include={"name", "type", "value"})
    return form


def decode_payload(stream: IO[bytes]) -> SavePayload:
    raw = stream.read()
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise DecodeError(f"save payload is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError("save payload must be a JSON object")

    try:
        return SavePayload.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"save payload has malformed fields: {e}") from e


def created_at_to_unix(value) -> int:
    """Unix time of the creation date at UTC midnight, or 0 when unparsable."""
    if isinstance(value, datetime.datetime):
        day = value.date()
    elif isinstance(value, datetime.date):
        day = value
    else:
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        token = str(value or "").strip().replace("T", " ").split(" ", 1)[0]
        try:
            day = datetime.datetime.strptime(token, DATE_FORMAT).date()
        except ValueError:
            logger.debug(f"Unparsable createdAt {value!r}, using epoch")
            return 0

    midnight = datetime.datetime(
        day.year, day.month, day.day, tzinfo=datetime.timezone.utc
    )
    return int(midnight.timestamp())


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).strftime(TIMESTAMP_FORMAT)
