from typing import Callable, Dict, List, Tuple

from post_editor.backends import post_editor
from post_editor.schemas.forms import FormElement

BackendFactory = Callable[..., post_editor.PostEditorBackend]


class BackendRegistry:
    """Backend factories keyed by name, filled in explicitly at startup."""

    def __init__(self):
        self._backends: Dict[str, Tuple[BackendFactory, List[FormElement]]] = {}

    def register(
        self, name: str, factory: BackendFactory, login_form: List[FormElement]
    ) -> None:
        if name in self._backends:
            raise ValueError(f"backend already registered: {name}")
        self._backends[name] = (factory, list(login_form))

    def get(self, name: str) -> BackendFactory:
        try:
            return self._backends[name][0]
        except KeyError:
            raise KeyError(f"unknown backend: {name}") from None

    def login_form(self, name: str) -> List[FormElement]:
        try:
            return list(self._backends[name][1])
        except KeyError:
            raise KeyError(f"unknown backend: {name}") from None

    def names(self) -> List[str]:
        return sorted(self._backends)


def build_registry() -> BackendRegistry:
    registry = BackendRegistry()
    registry.register("post_editor", post_editor.create, post_editor.LOGIN_FORM)
    return registry
