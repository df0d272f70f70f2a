from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel
from .error import ClientError, ServerError
import logging

from src.adapter.services.email_templates import EmailTemplateRenderer
from src.adapter.services.notification_dispatcher import BackgroundNotificationDispatcher
from src.adapter.services.smtp_email_sender import SmtpEmailSender
from src.app.verification import CodeHasher, VerificationPolicy

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.config.AUTO_CREATE_TABLES:
        from src.depends import engine

        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    yield
    # Let in-flight emails finish before the loop goes away
    await app.state.notification_dispatcher.drain()


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL)

    # Raises ValueError when OTP_SECRET is missing: no codes without a secret
    code_hasher = CodeHasher(ApplicationConfig.OTP_SECRET)

    app = FastAPI(title=f"{ApplicationConfig.APP_NAME} API", version="0.1.0", lifespan=lifespan)

    app.state.config = ApplicationConfig
    app.state.code_hasher = code_hasher
    app.state.verification_policy = VerificationPolicy.from_config(ApplicationConfig)
    app.state.notification_dispatcher = BackgroundNotificationDispatcher(
        sender=SmtpEmailSender.from_config(ApplicationConfig),
        renderer=EmailTemplateRenderer(ApplicationConfig.APP_NAME),
        timeout_seconds=ApplicationConfig.SMTP_TIMEOUT_SECONDS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import account, auth, health_check

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(account.router, tags=["Account"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
