from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from starlette.templating import Jinja2Templates

from govanity.config import FALLBACK_PLACEHOLDER, VanityConfig

DOCS_URL: Final[str] = "https://pkg.go.dev"

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@dataclass(frozen=True)
class Resolution:
    module: str
    source: str
    matched: bool


def resolve_module(config: VanityConfig, path: str) -> Resolution:
    """Map a request path (starting with "/") to a module name and source URL.

    The first configured module whose name is a plain string prefix of the path
    (without its leading slash) wins, scanning in configuration order. So "foo"
    also claims "/foobar". When nothing matches, or the first match is the empty
    name, the first path segment becomes the module and is substituted for every
    placeholder in the fallback template.
    """

    subject = path[1:]
    for name, source in config.modules.items():
        if subject.startswith(name):
            # An empty name claims every path but names no module: fall back.
            if name:
                return Resolution(module=name, source=source, matched=True)
            break

    parts = path.split("/", 2)
    module = parts[1] if len(parts) > 1 else ""
    source = config.fallback.replace(FALLBACK_PLACEHOLDER, module)
    return Resolution(module=module, source=source, matched=False)


def render_root(config: VanityConfig) -> str:
    return templates.get_template("root.html").render(docs_url=DOCS_URL, base=config.base)


def render_module(config: VanityConfig, path: str) -> str:
    resolution = resolve_module(config, path)
    return templates.get_template("module.html").render(
        docs_url=DOCS_URL,
        import_path=f"{config.base}/{resolution.module}",
        source=resolution.source,
        package=config.base + path,
    )


def render(config: VanityConfig, path: str) -> str:
    if path == "/":
        return render_root(config)
    return render_module(config, path)
