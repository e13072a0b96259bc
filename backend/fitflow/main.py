# fitflow/main.py
import time
import logging
import uuid
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select, text

from fitflow.errors import ContinuityError, FitflowError, InvalidInput, NotFoundError
from fitflow.routers.users import router as users_router
from fitflow.routers.exercises import router as exercises_router
from fitflow.routers.workouts import router as workouts_router
from fitflow.routers.sessions import router as sessions_router
from fitflow.routers.blocks import router as blocks_router
from fitflow.routers.session_exercises import router as session_exercises_router
from fitflow.routers.sets import router as sets_router
from fitflow.db import SessionLocal  # for healthz DB check
from fitflow.models import WorkoutPrescription
from fitflow.settings import get_settings

settings = get_settings()

log = logging.getLogger("uvicorn")
logging.getLogger("fitflow").setLevel(settings.LOG_LEVEL.upper())

app = FastAPI(
    title="Fitflow API",
    openapi_tags=[
        {"name": "users", "description": "Users and weight-unit preference"},
        {"name": "exercises", "description": "Exercise catalog"},
        {"name": "workouts", "description": "Workouts and their prescription groups"},
        {"name": "sessions", "description": "Performed workout sessions"},
        {"name": "blocks", "description": "Session blocks (mirrors of prescription groups)"},
        {"name": "session-exercises", "description": "Exercises logged within a block"},
        {"name": "sets", "description": "Sets logged per session exercise"},
    ],
)


# CORS (relax for local dev; tighten origins in prod via env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS.split(","),
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

# Domain errors -> HTTP
@app.exception_handler(InvalidInput)
def validation_error(request: Request, exc: InvalidInput):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.detail, "field": exc.field},
    )

@app.exception_handler(NotFoundError)
def not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.detail})

@app.exception_handler(ContinuityError)
def continuity_error(request: Request, exc: ContinuityError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": exc.detail, "problems": exc.problems},
    )

@app.exception_handler(FitflowError)
def domain_error(request: Request, exc: FitflowError):
    log.warning("unmapped domain error on %s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.detail})

@app.get("/")
def root():
    return {"ok": True, "name": "Fitflow API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
            # fails until migrations have run
            db.execute(select(WorkoutPrescription.id).limit(1))
        return {"status": "ok", "version": settings.API_VERSION}
    except Exception as e:
        log.warning("healthz degraded: %s", e)
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": settings.API_VERSION}

# Routers
app.include_router(users_router)
app.include_router(exercises_router)
app.include_router(workouts_router)
app.include_router(sessions_router)
app.include_router(blocks_router)
app.include_router(session_exercises_router)
app.include_router(sets_router)
