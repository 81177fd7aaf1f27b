import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gradetrack.core.config import UPLOAD_DIR
from gradetrack.core.exceptions import InvalidGrade, InvalidInput, NotFound
from gradetrack.core.logging_middleware import LoggingMiddleware
from gradetrack.db.init_db import init_db
from gradetrack.db.session import SessionLocal
from gradetrack.routers.assignments import router as assignments_router
from gradetrack.routers.dashboard import router as dashboard_router
from gradetrack.routers.submissions import router as submissions_router
from gradetrack.services.files import LocalFileStore
from gradetrack.services.tracker import build_tracker
from gradetrack.stores.durability import SqlKeyValueStore

logging.basicConfig(level=logging.INFO)

logger = logging.getLogger(__name__)

app = FastAPI(title="GradeTrack")

# Middleware
app.add_middleware(LoggingMiddleware)


# Core errors -> HTTP
@app.exception_handler(NotFound)
def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(InvalidGrade)
@app.exception_handler(InvalidInput)
def invalid_handler(request: Request, exc):
    return JSONResponse(status_code=400, content={"detail": exc.message})


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()
    app.state.tracker = build_tracker(
        SqlKeyValueStore(SessionLocal),
        files=LocalFileStore(UPLOAD_DIR),
    )
    logger.info(
        "tracker ready: %d assignment(s), %d submission(s)",
        len(app.state.tracker.assignments.list()),
        len(app.state.tracker.submissions.list()),
    )


# Include routers
app.include_router(assignments_router, tags=["assignments"])
app.include_router(submissions_router, tags=["submissions"])
app.include_router(dashboard_router, tags=["dashboards"])
