"""FastAPI service exposing the step counter over HTTP.

Phones POST batches of vertical acceleration to ``/verticalAcceleration``;
each batch updates the named session and returns its current step count.
Field names match the JSON the phone clients already send.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigError, SessionNotFound
from .registry import SessionRegistry
from .session import SessionConfig
from .settings import Settings

logger = logging.getLogger(__name__)


class IngestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    time: float = Field(..., ge=0.0, allow_inf_nan=False)
    sampling_frequency: int = Field(..., alias="samplingFrequency")
    fft_size: int = Field(..., alias="fftSize")
    vertical_accelerations: list[Optional[float]] = Field(
        ..., alias="verticalAccelerations"
    )


def make_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    app = FastAPI(title="Podometer Service", version="0.1.0")
    registry = SessionRegistry(settings.new_session, settings.default_config())
    app.state.settings = settings
    app.state.registry = registry

    @app.exception_handler(ConfigError)
    async def _config_error(request: Request, exc: ConfigError) -> JSONResponse:
        logger.warning("rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(SessionNotFound)
    async def _not_found(request: Request, exc: SessionNotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:  # pragma: no cover - trivial
        return {"status": "ok"}

    # plain def: these take per-session threading locks and run the FFT,
    # FastAPI runs them in its threadpool
    @app.post("/verticalAcceleration")
    def post_samples(payload: IngestModel) -> dict:
        config = SessionConfig(
            sample_rate=payload.sampling_frequency,
            window_size=payload.fft_size,
            elapsed_s=payload.time,
        )
        # reject before a session is created or touched
        config.validate()
        state = registry.get_or_create(payload.name, config)
        snap = state.ingest(config, payload.vertical_accelerations)
        return snap.to_dict()

    @app.get("/verticalAcceleration")
    def get_state(name: Optional[str] = Query(None)) -> dict:
        if name is None:
            names = registry.names()
            if len(names) != 1:
                raise HTTPException(
                    status_code=400, detail="query parameter 'name' is required"
                )
            name = names[0]
        return registry.get(name).snapshot().to_dict()

    @app.get("/sessions")
    def list_sessions() -> dict:
        return {"sessions": registry.names()}

    @app.delete("/sessions/{name}")
    def delete_session(name: str) -> dict:
        registry.remove(name)
        return {"status": "ok", "name": name}

    return app


app = make_app()


def main() -> None:  # pragma: no cover - manual run helper
    import uvicorn

    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    logger.info(
        "policy=%s time=%s band=[%s, %s] Hz",
        settings.reset_policy.value,
        settings.time_source.value,
        settings.band_min_hz,
        settings.band_max_hz,
    )
    uvicorn.run(make_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":  # pragma: no cover
    main()
