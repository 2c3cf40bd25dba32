from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from post_editor.models.post import Post


class PostsRepo:
    """SQL statements against the Posts table, one per filesystem operation."""

    def __init__(self, db: Session):
        self.db = db

    def list_languages(self) -> List[str]:
        rows = self.db.query(Post.lang).distinct().order_by(Post.lang).all()
        return [lang for (lang,) in rows]

    def list_slugs(self, lang: str) -> List[Tuple[str, object]]:
        rows = (
            self.db.query(Post.slug, Post.createdAt)
            .filter(Post.lang == lang)
            .order_by(Post.slug)
            .all()
        )
        return [(slug, created_at) for slug, created_at in rows]

    def get_post(self, lang: str, slug: str) -> Optional[Post]:
        return (
            self.db.query(Post)
            .filter(Post.lang == lang, Post.slug == slug)
            .one_or_none()
        )

    def exists(self, lang: str, slug: str) -> bool:
        return (
            self.db.query(Post.slug)
            .filter(Post.lang == lang, Post.slug == slug)
            .first()
            is not None
        )

    def insert_post(self, lang: str, slug: str, now: str) -> None:
        self.db.add(Post(lang=lang, slug=slug, createdAt=now, updatedAt=now))
        self.db.flush()

    def publish_post(
        self,
        lang: str,
        slug: str,
        *,
        title: str,
        description: str,
        content: str,
        now: str,
    ) -> int:
        return (
            self.db.query(Post)
            .filter(Post.lang == lang, Post.slug == slug)
            .update(
                {
                    Post.published: True,
                    Post.title: title,
                    Post.description: description,
                    Post.content: content,
                    Post.updatedAt: now,
                },
                synchronize_session=False,
            )
        )

    def delete_post(self, lang: str, slug: str) -> int:
        return (
            self.db.query(Post)
            .filter(Post.lang == lang, Post.slug == slug)
            .delete(synchronize_session=False)
        )
