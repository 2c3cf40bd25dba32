from post_editor.errors import InvalidPathError
from post_editor.schemas.fs import Metadata
from post_editor.services.path_codec import Address, parse_path


def metadata_for(address: Address) -> Metadata:
    # Languages only exist through their posts, so there is no mkdir.
    return Metadata(
        can_create_directory=False,
        can_create_file=address.slug == "",
        can_rename=address.slug != "",
        can_move=False,
        refresh_on_create=True,
        hide_extension=True,
    )


def metadata_for_path(path: str) -> Metadata:
    try:
        return metadata_for(parse_path(path))
    except InvalidPathError:
        return Metadata(can_create_file=False, can_rename=False)
