"""FastAPI route auto-discovery.

Conventions:
- Route modules live under `image_dock/routes/`.
- Each module exports a `router: APIRouter`.
- Files starting with `_` are ignored.
- A module may export `ROUTER_CONFIG` (a mapping) with extra
  `include_router(...)` kwargs. `ROUTER_CONFIG["prefix"] = ""` mounts the
  router at the application root.
- A router with no prefix and no configured prefix is mounted at
  `/api/<module path>`.
"""

import importlib
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from fastapi import APIRouter, FastAPI

logger = logging.getLogger(__name__)

_DEFAULT_ROUTES_DIR = Path(__file__).parent.parent / "routes"


class RouterDiscoveryError(Exception):
    """Raised when router discovery fails."""


def _iter_route_files(routes_dir: Path) -> list[Path]:
    return sorted(
        (path for path in routes_dir.rglob("*.py") if path.is_file() and not path.name.startswith("_")),
        key=lambda path: path.as_posix(),
    )


def _module_path(routes_dir: Path, py_file: Path) -> str:
    """`<pkg>/routes/images.py` -> `<pkg>.routes.images`."""
    relative = py_file.relative_to(routes_dir.parent.parent).with_suffix("")
    return ".".join(relative.parts)


def _load_router(module_path: str, py_file: Path) -> tuple[APIRouter, dict[str, Any]]:
    try:
        module = importlib.import_module(module_path)
    except Exception as e:
        msg = f"Failed to import route module '{module_path}'.\n  File: {py_file}"
        raise RouterDiscoveryError(msg) from e

    router = getattr(module, "router", None)
    if not isinstance(router, APIRouter):
        msg = (
            f"Router file '{py_file.name}' must export 'router' as an APIRouter.\n"
            f"  Module: {module_path}\n"
            f"  Type: {type(router).__name__}"
        )
        raise RouterDiscoveryError(msg)

    config = getattr(module, "ROUTER_CONFIG", {})
    if not isinstance(config, Mapping):
        msg = f"ROUTER_CONFIG in '{module_path}' must be a mapping, got {type(config).__name__}"
        raise RouterDiscoveryError(msg)

    return router, dict(config)


def discover_routers(routes_dir: Path) -> list[tuple[APIRouter, dict[str, Any]]]:
    """Discover routers under a routes directory.

    Returns a list of `(router, include_kwargs)` pairs. Prefix/tags already
    set on the router itself are never passed again.
    """
    routers: list[tuple[APIRouter, dict[str, Any]]] = []

    for py_file in _iter_route_files(routes_dir):
        module_path = _module_path(routes_dir, py_file)
        router, config = _load_router(module_path, py_file)

        include_kwargs = {key: value for key, value in config.items() if key not in {"prefix", "tags"}}

        if not router.prefix:
            prefix = config.get("prefix", f"/api/{py_file.relative_to(routes_dir).with_suffix('').as_posix()}")
            if not isinstance(prefix, str):
                msg = f"ROUTER_CONFIG['prefix'] in '{module_path}' must be a string"
                raise RouterDiscoveryError(msg)
            include_kwargs["prefix"] = prefix

        if not router.tags:
            include_kwargs["tags"] = list(config.get("tags", [py_file.stem]))

        routers.append((router, include_kwargs))

    return routers


def register_routers(app: FastAPI, routes_dir: Path | None = None) -> None:
    """Discover and register routers with a FastAPI app.

    Fails fast on startup if a route module can't be imported or doesn't export a
    valid `router`.
    """
    routes_dir = routes_dir or _DEFAULT_ROUTES_DIR
    if not routes_dir.is_dir():
        raise FileNotFoundError(f"Routes directory not found: {routes_dir}")

    routers = discover_routers(routes_dir)
    if not routers:
        logger.warning("No routers discovered in %s", routes_dir)
        return

    for router, include_kwargs in routers:
        app.include_router(router, **include_kwargs)
        logger.debug(
            "Registered router %s (tags: %s)",
            include_kwargs.get("prefix", router.prefix) or "/",
            include_kwargs.get("tags", router.tags),
        )
