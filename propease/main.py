from fastapi import FastAPI

from propease.api.v1.router import v1_router
from propease.core.config import get_settings
from propease.core.errors import install_error_handlers
from propease.core.logging import configure_logging
from propease.core.middleware import RequestIdMiddleware


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
    )
    app.state.settings = settings

    # Middleware: Request ID
    app.add_middleware(RequestIdMiddleware, header_name=settings.request_id_header)

    # Errors leave as {"message": ...}
    install_error_handlers(app)

    # API
    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


app = create_app()
