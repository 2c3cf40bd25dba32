from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from post_editor import dependencies as deps
from post_editor.backends.registry import BackendRegistry
from post_editor.schemas.forms import FormElement

router = APIRouter()


class BackendDescription(BaseModel):
    name: str
    form: List[FormElement]


@router.get("/backends", response_model=List[BackendDescription])
def list_backends(registry: BackendRegistry = Depends(deps.get_registry)):
    """Registered backends and the login form each one expects."""
    return [
        BackendDescription(name=name, form=registry.login_form(name))
        for name in registry.names()
    ]
