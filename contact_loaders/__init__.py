"""Contact loaders, looked up by name."""
import importlib
from types import ModuleType

_LOADERS = {
    "actionnetwork": "contact_loaders.actionnetwork",
}


def available_loaders() -> list[str]:
    return sorted(_LOADERS)


def get_loader(name: str) -> ModuleType:
    """Return the loader module registered under name.

    Raises:
        KeyError: no loader has that name.
    """
    if name not in _LOADERS:
        raise KeyError(f"Unknown contact loader: {name!r}")
    return importlib.import_module(_LOADERS[name])
