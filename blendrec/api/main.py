"""FastAPI application main module.

This module defines the main FastAPI application instance and core API endpoints
for the BlendRec recommendation service. It provides health and status
endpoints and serves as the entry point for the API server.
"""

from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from blendrec import __version__
from blendrec.api.exceptions import BlendRecException
from blendrec.api.logging_config import RequestLoggingMiddleware
from blendrec.api.metrics import metrics_service
from blendrec.api.routes import recommend

# Create FastAPI application instance
app = FastAPI(
    title="BlendRec API",
    description="Explainable hybrid product recommendation service",
    version=__version__,
)

app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(recommend.router)


@app.exception_handler(BlendRecException)
async def blendrec_exception_handler(request: Request, exc: BlendRecException) -> JSONResponse:
    """Render BlendRec errors as ``{"error", "message", "details"}`` bodies."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Example:
        >>> response = client.get("/ping")
        >>> assert response.json() == {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/status")
def status() -> Dict[str, Any]:
    """Report whether data is loaded, its size, and service metrics."""
    return {
        **recommend.data_status(),
        "metrics": metrics_service.get_metrics(),
        "version": __version__,
    }


if __name__ == "__main__":
    import uvicorn

    from blendrec.api.logging_config import setup_logging
    from blendrec.config import load_config

    setup_logging(load_config().log_level)

    uvicorn.run(
        "blendrec.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
