import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from tipsy.adapter.database import build_engine, build_session_factory, create_tables
from tipsy.adapter.services.logging_email_sender import LoggingEmailSender
from tipsy.adapter.services.smtp_email_sender import SmtpEmailSender, SmtpSettings
from tipsy.api.middleware.rate_limit import RateLimiter, RateLimitMiddleware
from tipsy.app.services.email_sender import IEmailSender
from tipsy.app.services.token_service import TokenService
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code} {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    error_dict = {"code": "VALIDATION_ERROR", "message": message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": error_dict})


async def handle_database_error(request: Request, exc: SQLAlchemyError):
    # SQL text and driver messages stay in the logs
    logger.error(f"Database error on {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}},
    )


def build_email_sender(ApplicationConfig) -> IEmailSender:
    if not ApplicationConfig.SMTP_HOST:
        logger.warning("SMTP_HOST is not set, outgoing emails will only be logged")
        return LoggingEmailSender()

    return SmtpEmailSender(
        SmtpSettings(
            host=ApplicationConfig.SMTP_HOST,
            port=ApplicationConfig.SMTP_PORT,
            secure=ApplicationConfig.SMTP_SECURE,
            username=ApplicationConfig.SMTP_USER,
            password=ApplicationConfig.SMTP_PASS,
            from_email=ApplicationConfig.SMTP_FROM,
        )
    )


def create_app(ApplicationConfig) -> FastAPI:
    # Raises ConfigurationError without JWT_SECRET: no app, no server
    token_service = TokenService(
        ApplicationConfig.JWT_SECRET,
        expires_in=timedelta(seconds=ApplicationConfig.JWT_EXPIRES_IN_SECONDS),
    )

    engine = build_engine(ApplicationConfig.DB_URI, ApplicationConfig.DB_POOL_TIMEOUT)
    email_sender = build_email_sender(ApplicationConfig)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.DB_CREATE_TABLES:
            await create_tables(engine)
        yield
        logger.info("Shutting down, draining connection pool")
        await email_sender.close()
        await engine.dispose()

    app = FastAPI(title="Tipsy API", version="0.1.0", lifespan=lifespan)

    app.state.config = ApplicationConfig
    app.state.token_service = token_service
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.email_sender = email_sender
    app.state.rate_limiter = RateLimiter()

    if ApplicationConfig.RATE_LIMIT_ENABLED:
        app.add_middleware(
            RateLimitMiddleware,
            limiter=app.state.rate_limiter,
            trust_forwarded=ApplicationConfig.RATE_LIMIT_TRUST_FORWARDED,
        )

    # Added last so it wraps the rate limiter and answers preflights first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    from tipsy.api.routes import auth, health_check, users

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(users.router, tags=["Users"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)

    return app
