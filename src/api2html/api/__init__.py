from __future__ import annotations

from fastapi import FastAPI

from .. import __version__
from ..config import AppConfig, load_config
from ..core import RenderService
from ..settings import Settings, get_settings
from .routers import health, render


def create_app(
    config: AppConfig | None = None,
    *,
    settings: Settings | None = None,
    require_enabled: bool = True,
) -> FastAPI:
    settings = settings or get_settings()
    config = config or _prepare_config(settings)
    if require_enabled and not config.api.enable_local_api:
        raise RuntimeError("Local API is disabled. Enable it via configuration or environment.")

    app = FastAPI(title="api2html", version=__version__)
    app.state.config = config
    app.state.service = RenderService(config)

    app.include_router(health.router)
    app.include_router(render.router)
    return app


def _prepare_config(settings: Settings) -> AppConfig:
    config = load_config(settings.config_path)
    if settings.enable_local_api is not None:
        config.api.enable_local_api = settings.enable_local_api
    return config


def serve() -> None:
    import uvicorn

    settings = get_settings()
    config = _prepare_config(settings)
    uvicorn.run(create_app(config, settings=settings), host=config.api.host, port=config.api.port)


__all__ = ["create_app", "serve"]
