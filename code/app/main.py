from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import configure_logging
from app.core.models import (
    ContextRequest,
    ContextResponse,
    SimulateRequest,
    SimulateResponse,
    WhatIfRequest,
    WhatIfResponse,
)
from app.core.pipeline import run_context, run_simulation_request, run_whatif_request
from app.core.sample_payloads import PRESETS
from recession.errors import InvalidTrialCountError, SimulationCancelled, SimulationError

configure_logging()

app = FastAPI(title="Recession Probability Simulator API")


@app.exception_handler(SimulationError)
def simulation_error_handler(request: Request, exc: SimulationError):
    if isinstance(exc, InvalidTrialCountError):
        status = 422
    elif isinstance(exc, SimulationCancelled):
        status = 409
    else:
        status = 500
    return JSONResponse(status_code=status, content={"detail": str(exc)})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/presets")
def presets():
    return PRESETS


# Plain def endpoints run in FastAPI's thread pool, off the event loop.
@app.post("/simulate", response_model=SimulateResponse)
def simulate(payload: SimulateRequest):
    return run_simulation_request(payload)


@app.post("/whatif", response_model=WhatIfResponse)
def whatif(payload: WhatIfRequest):
    return run_whatif_request(payload)


@app.post("/context", response_model=ContextResponse)
def context(payload: ContextRequest):
    return run_context(payload)
