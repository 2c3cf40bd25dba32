from typing import Literal, Optional

from pydantic import BaseModel

UNKNOWN_SIZE = -1


class Entry(BaseModel):
    name: str
    type: Literal["directory", "file"]
    size: Optional[int] = None
    time: Optional[int] = None  # unix seconds


class Metadata(BaseModel):
    can_create_directory: bool = False
    can_create_file: bool = False
    can_rename: bool = False
    can_move: bool = False
    refresh_on_create: bool = True
    hide_extension: bool = True
