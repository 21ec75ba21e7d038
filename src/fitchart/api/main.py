"""FastAPI application factory."""
from fastapi import FastAPI

from fitchart.api.routes import channels, charts


def create_app() -> FastAPI:
    """Build and return the FastAPI app."""
    app = FastAPI(
        title="Fitchart API",
        description="Workout channel charts and hover tooltips",
        version="0.1.0",
    )

    app.include_router(channels.router, prefix="/channels", tags=["channels"])
    app.include_router(charts.router, prefix="/charts", tags=["charts"])

    return app


# Module-level app instance for uvicorn
app = create_app()
