import logging
import secrets
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cluster import KubeClusterAccessor
from remediate import ListingError, remediate
from settings import Settings, configure_logging

bearer_scheme = HTTPBearer(auto_error=False)


def require_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> None:
    expected = request.app.state.settings.bearer_token.encode()
    # Bytes: compare_digest rejects non-ASCII str, and headers arrive latin-1 decoded.
    if credentials is None or not secrets.compare_digest(credentials.credentials.encode(), expected):
        host = request.client.host if request.client else "unknown"
        logging.warning(f"Rejected unauthorized request from {host}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def create_app(settings: Settings, accessor) -> FastAPI:
    app = FastAPI(title="CSI Restarter")
    app.state.settings = settings
    app.state.accessor = accessor

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # Sync handler: FastAPI runs it in its threadpool, one thread per request.
    @app.api_route("/delete", methods=["GET", "POST"], dependencies=[Depends(require_token)])
    def delete_pods_with_pvc():
        try:
            results = remediate(settings, accessor)
        except ListingError as e:
            logging.error(f"Remediation aborted: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to list cluster resources",
            )
        return {
            "dry_run": settings.dry_run,
            "results": [r.as_dict() for r in results],
        }

    return app


def main():
    settings = Settings()
    configure_logging(settings)
    accessor = KubeClusterAccessor.from_settings(settings)
    app = create_app(settings, accessor)
    logging.info(f"Listening on {settings.bind_address}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
