from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from core.env_config import settings
from core.exceptions import AppException
from core.handlers import app_exception_handler
from core.init_db import init_db
from core.logging_config import setup_logging
from core.rate_limit import limiter
from users.auth import router as auth_router
from users.users import router as users_router
from api_settings.main import router as settings_router
from transactions.main import router as transaction_router
from payments.gateway import router as payment_router
from qr.main import router as qr_router

setup_logging()
init_db()


def create_app() -> FastAPI:
    app = FastAPI(title="WeooWallet API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(AppException, app_exception_handler)

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(settings_router)
    app.include_router(transaction_router)
    app.include_router(payment_router)
    app.include_router(qr_router)

    @app.get("/")
    def health_check():
        return {"status": "healthy", "version": app.version}

    return app


app = create_app()
