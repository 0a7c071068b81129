import sentry_sdk
from fastapi import FastAPI
from sentry_sdk.integrations.starlette import StarletteIntegration
from starlette.middleware.cors import CORSMiddleware

from app.api import errors
from app.api.routers.healthz import router as healthz_router
from app.api.routers.readyz import router as readyz_router
from app.api.routers.users import router as users_router
from app.core.config import get_settings
from app.logging import get_logger, setup_logging
from app.middleware.request_id import request_id_middleware


def create_app() -> FastAPI:
    settings = get_settings()
    # Initialize structured logging first
    setup_logging(settings)

    # Sentry is a no-op without a DSN
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.app_env,
            integrations=[StarletteIntegration()],
            traces_sample_rate=settings.sentry_traces_rate,
            send_default_pii=False,
        )

    app = FastAPI(title="User Rating Service")
    # Request-ID middleware (JSON access log)
    app.middleware("http")(request_id_middleware)

    if settings.origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS", "HEAD"],
            allow_headers=["*"],
        )

    errors.install(app)
    app.include_router(users_router)
    app.include_router(healthz_router)
    app.include_router(readyz_router)

    # Simple health for tests and uptime checks
    @app.get("/health")
    def health():
        return {"status": "ok", "env": settings.app_env}

    get_logger(__name__).info("app_startup", env=settings.app_env)
    return app


app = create_app()
