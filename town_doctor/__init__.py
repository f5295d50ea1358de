"""Town Doctor - health checks for filesystem-backed agent towns."""

import importlib.metadata

try:
    __version__ = importlib.metadata.version("town-doctor")
except importlib.metadata.PackageNotFoundError:  # pragma: no cover - source checkout
    __version__ = "0.0.0"

__all__ = ["__version__"]
