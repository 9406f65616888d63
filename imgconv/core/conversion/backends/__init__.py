"""Codec backends and the registry that selects between them."""

from typing import Dict, List

from imgconv.core.conversion.backends.base import BaseBackend
from imgconv.core.conversion.backends.pillow_backend import PillowBackend
from imgconv.core.conversion.backends.vips_backend import VipsBackend
from imgconv.core.exceptions import ConfigurationError
from imgconv.models.conversion import Backend, ImageFormat

_BACKENDS: Dict[Backend, type] = {
    Backend.PILLOW: PillowBackend,
    Backend.VIPS: VipsBackend,
}

_instances: Dict[Backend, BaseBackend] = {}


def get_backend(kind: Backend) -> BaseBackend:
    """Return the shared backend instance for ``kind``.

    Raises:
        ConfigurationError: If ``kind`` names no registered backend
    """
    try:
        kind = Backend(kind)
    except ValueError:
        raise ConfigurationError(
            f"Unknown backend {kind!r}",
            details={
                "config_key": "backend",
                "config_value": str(kind),
                "valid_options": [b.value for b in Backend],
            },
        )
    if kind not in _instances:
        _instances[kind] = _BACKENDS[kind]()
    return _instances[kind]


def supported_formats(kind: Backend) -> List[ImageFormat]:
    return get_backend(kind).supported_formats()


__all__ = [
    "BaseBackend",
    "PillowBackend",
    "VipsBackend",
    "get_backend",
    "supported_formats",
]
