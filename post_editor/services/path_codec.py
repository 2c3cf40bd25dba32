from dataclasses import dataclass

from post_editor.errors import InvalidPathError

POST_SUFFIX = ".md"


@dataclass(frozen=True)
class Address:
    language: str = ""
    slug: str = ""

    @property
    def is_root(self) -> bool:
        return self.language == ""

    @property
    def is_post(self) -> bool:
        return self.language != "" and self.slug != ""


def parse_path(path: str) -> Address:
    """
    Split a virtual path into its (language, slug) address.

    "" and "/" address the root, "/en" a language folder and "/en/my-post"
    a single post. Anything deeper is rejected.
    """
    trimmed = (path or "").strip("/")
    if not trimmed:
        return Address()

    segments = trimmed.split("/")
    if len(segments) > 2:
        raise InvalidPathError(f"invalid path: {path!r}")

    if len(segments) == 1:
        return Address(language=segments[0])
    return Address(language=segments[0], slug=segments[1])


def parse_file_path(path: str) -> Address:
    """Like parse_path, but accepts the rendered "{slug}.md" file name."""
    address = parse_path(path)
    if address.slug.endswith(POST_SUFFIX):
        return Address(address.language, address.slug.removesuffix(POST_SUFFIX))
    return address


def require_post(address: Address, path: str) -> Address:
    if not address.is_post:
        raise InvalidPathError(f"invalid post path: {path!r}")
    return address
