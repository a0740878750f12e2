import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse

from src.core.config import Config, config
from src.core.errors import WebhookRequestError
from src.core.utils.logging import configure_logging
from src.integrations.github.statuses import GitHubStatusClient
from src.integrations.misskey.client import MisskeyClient
from src.tasks.background import BackgroundTaskRunner
from src.webhooks.auth import compile_networks, verify_source_ip
from src.webhooks.dispatcher import build_dispatcher
from src.webhooks.router import router as webhook_router

logger = structlog.get_logger()

SHUTDOWN_DRAIN_TIMEOUT = 10.0


def create_app(app_config: Config) -> FastAPI:
    """
    Build the application from an already loaded configuration.

    Everything the request path needs is created here once and kept on
    ``app.state``; none of it changes while the process runs.
    """
    app = FastAPI(
        title="GitHub Misskey Notifier",
        description="Posts GitHub webhook events to a Misskey instance.",
        version="0.1.0",
        # Every route, health checks included, answers only GitHub's hook ranges
        dependencies=[Depends(verify_source_ip)],
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    runner = BackgroundTaskRunner()
    publisher = MisskeyClient(app_config.misskey, app_config.http)
    status_client = GitHubStatusClient(app_config.http)

    app.state.config = app_config
    app.state.github_config = app_config.github
    app.state.allowed_networks = compile_networks(app_config.github.allowed_ip_blocks)
    app.state.runner = runner
    app.state.dispatcher = build_dispatcher(
        app_config.hooks,
        publisher,
        status_client,
        runner,
        push_branch=app_config.github.push_branch,
    )

    # --- Error Handling ---

    @app.exception_handler(WebhookRequestError)
    async def webhook_request_error_handler(request: Request, exc: WebhookRequestError) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    # --- Include Routers ---

    app.include_router(webhook_router, tags=["GitHub Webhooks"])

    # --- Root Endpoint ---

    @app.get("/", tags=["Health Check"])
    async def read_root():
        """A simple health check endpoint to confirm the service is running."""
        return {"status": "ok", "message": "GitHub Misskey notifier is running."}

    @app.get("/health/tasks", tags=["Health Check"])
    async def health_tasks():
        """Report in-flight background handlers and the enabled hooks."""
        return {
            "pending": runner.pending,
            "hooks": [event_type.value for event_type in app.state.dispatcher.registered_event_types],
        }

    # --- Application Lifecycle ---

    @app.on_event("startup")
    async def startup_event():
        """Refuse to start without the secrets and target instance."""
        app_config.validate()
        logger.info(
            "service_started",
            port=app_config.server.port,
            hooks=len(app.state.dispatcher.registered_event_types),
            ip_check_enabled=app_config.github.ip_check_enabled,
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        """Let in-flight notifications finish before the process exits."""
        await runner.drain(timeout=SHUTDOWN_DRAIN_TIMEOUT)
        logger.info("service_stopped")

    return app


configure_logging(config.logging)

app = create_app(config)


def run() -> None:
    """Console entry point: serve the app on the configured host and port."""
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)
