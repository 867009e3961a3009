from __future__ import annotations

import re

import pytest

from govanity.config import VanityConfig
from govanity.resolve import render, render_root, resolve_module


def _go_import(html: str) -> str:
    m = re.search(r'<meta name="go-import" content="([^"]*)">', html)
    assert m is not None
    return m.group(1)


def _refresh(html: str) -> str:
    m = re.search(r'<meta http-equiv="refresh" content="0; url=([^"]*)">', html)
    assert m is not None
    return m.group(1)


def test_configured_module_matches(config: VanityConfig) -> None:
    html = render(config, "/util/subpkg")

    assert _go_import(html) == "example.org/util https://github.com/x/util"
    assert _refresh(html) == "https://pkg.go.dev/example.org/util/subpkg"


def test_unmatched_module_uses_fallback(config: VanityConfig) -> None:
    html = render(config, "/other/thing")

    assert _go_import(html) == "example.org/other https://github.com/x/other"
    assert _refresh(html) == "https://pkg.go.dev/example.org/other/thing"


def test_prefix_match_claims_longer_names() -> None:
    cfg = VanityConfig(
        base="example.org",
        modules={"foo": "https://example.com/foo"},
        fallback="https://github.com/x/%",
        socket_path="/tmp/x.sock",
    )

    res = resolve_module(cfg, "/foobar")
    assert res.matched is True
    assert res.module == "foo"
    assert res.source == "https://example.com/foo"
    assert _go_import(render(cfg, "/foobar")) == "example.org/foo https://example.com/foo"


def test_single_segment_path(config: VanityConfig) -> None:
    res = resolve_module(config, "/x")
    assert res.module == "x"
    assert res.source == "https://github.com/x/x"
    assert res.matched is False


def test_deep_path_keeps_first_segment_only(config: VanityConfig) -> None:
    res = resolve_module(config, "/a/b/c/d")
    assert res.module == "a"
    assert _refresh(render(config, "/a/b/c/d")) == "https://pkg.go.dev/example.org/a/b/c/d"


def test_fallback_replaces_every_placeholder() -> None:
    cfg = VanityConfig(base="example.org", fallback="https://%.example.com/%.git", socket_path="s")

    assert resolve_module(cfg, "/lib/v2").source == "https://lib.example.com/lib.git"


def test_empty_modules_always_fall_back() -> None:
    cfg = VanityConfig(base="example.org", fallback="https://github.com/x/%", socket_path="s")

    assert _go_import(render(cfg, "/util")) == "example.org/util https://github.com/x/util"


def test_first_configured_module_wins() -> None:
    cfg = VanityConfig(
        base="example.org",
        modules={"util": "https://a.example/util", "utilx": "https://b.example/utilx"},
        socket_path="s",
    )

    assert resolve_module(cfg, "/utilx/y").source == "https://a.example/util"


@pytest.mark.parametrize("modules", [{}, {"util": "https://github.com/x/util"}, {"": "x"}])
def test_root_ignores_modules(modules: dict[str, str]) -> None:
    cfg = VanityConfig(base="example.org", modules=modules, fallback="%", socket_path="s")

    html = render(cfg, "/")
    assert html == render_root(cfg)
    assert _refresh(html) == "https://pkg.go.dev/?q=example.org"
    assert "go-import" not in html


def test_render_is_idempotent(config: VanityConfig) -> None:
    assert render(config, "/util/a") == render(config, "/util/a")
    assert render(config, "/zzz") == render(config, "/zzz")


def test_render_escapes_markup() -> None:
    cfg = VanityConfig(base="example.org", fallback="https://github.com/x/%", socket_path="s")

    html = render(cfg, '/"><script>')
    assert "<script>" not in html
    assert "&#34;&gt;&lt;script&gt;" in html


def test_empty_module_name_falls_back() -> None:
    cfg = VanityConfig(
        base="example.org",
        modules={"": "https://x/empty"},
        fallback="https://github.com/x/%",
        socket_path="s",
    )

    res = resolve_module(cfg, "/lib/v2")
    assert res.matched is False
    assert res.module == "lib"
    assert res.source == "https://github.com/x/lib"
    assert _go_import(render(cfg, "/lib/v2")) == "example.org/lib https://github.com/x/lib"


def test_named_module_before_empty_name_still_matches() -> None:
    cfg = VanityConfig(
        base="example.org",
        modules={"lib": "https://x/lib", "": "https://x/empty"},
        fallback="https://github.com/x/%",
        socket_path="s",
    )

    assert resolve_module(cfg, "/lib/v2").source == "https://x/lib"
