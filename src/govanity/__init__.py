__version__ = "0.1.0"

from govanity.config import VanityConfig, load_config  # noqa: E402
from govanity.resolve import Resolution, render, resolve_module  # noqa: E402

__all__ = [
    "Resolution",
    "VanityConfig",
    "__version__",
    "load_config",
    "render",
    "resolve_module",
]
