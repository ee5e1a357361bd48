"""FastAPI application exposing backup listing and manual backups.

Routes:
    GET  /          API documentation (no auth)
    GET  /backups   List stored backups (bearer token)
    POST /backup    Run a backup now (bearer token)

Usage:
    from db_backup.api.app import create_app
    from db_backup.config import load_backup_config

    app = create_app(load_backup_config())

    # or: uvicorn --factory db_backup.api.app:create_app_from_env
"""

import logging
import secrets

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from db_backup import __version__
from db_backup.backup.orchestrator import BackupOrchestrator, ConnectionFactory, list_backups
from db_backup.config.loader import load_backup_config
from db_backup.config.models import BackupConfig
from db_backup.errors import AuthError
from db_backup.factory import create_sink
from db_backup.storage.base import StorageSink

logger = logging.getLogger(__name__)

API_DOCUMENTATION = {
    "message": "PostgreSQL to object storage backup API",
    "endpoints": {
        "GET /": "This help message",
        "GET /backups": "List all backup files (requires auth)",
        "POST /backup": "Trigger a manual backup (requires auth)",
    },
    "authentication": "Bearer token required for protected endpoints",
}


def create_app(
    config: BackupConfig,
    sink: StorageSink | None = None,
    connection_factory: ConnectionFactory | None = None,
) -> FastAPI:
    """Build the API application around one configuration.

    Args:
        config: Backup configuration; ``config.api.token`` is the shared
            bearer secret.  With no token configured every protected
            request is rejected.
        sink: Storage sink override (built from ``config.storage`` when
            omitted).
        connection_factory: Database connection factory override.
    """
    app = FastAPI(title="db-backup", version=__version__)
    bearer = HTTPBearer(auto_error=False)
    storage = sink if sink is not None else create_sink(config.storage)

    async def require_token(
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    ) -> None:
        expected = config.api.token
        if expected is None or credentials is None:
            raise AuthError("Unauthorized")
        if not secrets.compare_digest(
            credentials.credentials.encode("utf-8"),
            expected.get_secret_value().encode("utf-8"),
        ):
            raise AuthError("Unauthorized")

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
        return JSONResponse(
            {"error": "Unauthorized"},
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.get("/")
    async def index() -> dict:
        return API_DOCUMENTATION

    @app.get("/backups", dependencies=[Depends(require_token)])
    async def get_backups():
        try:
            backups = await list_backups(storage, config.api.list_limit)
        except Exception as e:
            logger.error("Failed to list backups: %s", e)
            return JSONResponse({"error": f"Failed to list backups: {e}"}, status_code=500)
        return {"count": len(backups), "backups": backups}

    @app.post("/backup", dependencies=[Depends(require_token)])
    async def post_backup():
        result = await BackupOrchestrator(
            config, connection_factory=connection_factory, sink=storage
        ).run()
        if not result.success:
            return JSONResponse({"error": f"Backup failed: {result.error}"}, status_code=500)
        return {"message": "Backup completed successfully", "filename": result.filename}

    return app


def create_app_from_env() -> FastAPI:
    """App factory for ``uvicorn --factory``; reads config from file/env."""
    return create_app(load_backup_config())
