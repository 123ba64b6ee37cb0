"""FastAPI application with membership endpoints."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from membership import __version__
from membership.auth import authenticate_user, create_access_token
from membership.db import init_db
from membership.logging_config import configure_logging
from membership.metrics import router as metrics_router
from membership.schedules.routes import router as schedules_router
from membership.schemas import LoginRequest, LoginResponse
from membership.settings import settings
from membership.students.routes import router as students_router
from membership.students.schemas import MISSING_FIELDS


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if settings.create_tables_on_startup:
        init_db()
    logger.info("Membership API {} started", __version__)
    yield


app = FastAPI(
    title="Membership Backend",
    description="Student membership and shift management API",
    version=__version__,
    lifespan=lifespan,
)

# Observability
app.include_router(metrics_router)  # exposes GET /metrics

# Functional routers
app.include_router(students_router)
app.include_router(schedules_router)


def validation_message(errors) -> str:
    """Human-readable message for a request validation failure."""
    if any(err.get("type") == "missing" or err.get("input") is None for err in errors):
        return MISSING_FIELDS
    if not errors:
        return "Invalid request"
    msg = str(errors[0].get("msg", "Invalid request"))
    return msg.removeprefix("Value error, ")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Validation failures are 400s carrying a single message."""
    message = validation_message(exc.errors())
    logger.warning("{} {} rejected: {}", request.method, request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


# --------------------
# Auth
# --------------------
@app.post("/auth/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """Authenticate user and return JWT token."""
    role = authenticate_user(request.username, request.password)
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token(data={"sub": request.username, "role": role})
    return LoginResponse(access_token=access_token, token_type="bearer", role=role)


# --------------------
# Root
# --------------------
@app.get("/")
async def root():
    return {"message": "Membership management API", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
