from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from timing_asgi import TimingMiddleware, TimingClient  # type: ignore
from timing_asgi.integrations import StarletteScopeToName  # type: ignore

from samudra.core import config
from samudra.core.database.engine import close_db, init_db
from samudra.core.errors import ApiError, CODE_BY_STATUS, SERVER_ERROR
from samudra.core.rate_limit import limiter
from samudra.core.schemas import ErrorDetail, ErrorResponse
from samudra.features.permissions.routes import router as permission_router
from samudra.features.roles.routes import router as role_router
from samudra.utils import get_logger


log = get_logger(__name__)
log.info("Initializing server")
app = FastAPI(
    title="Samudra Paket ERP - RBAC",
    description="Role and permission management for the Samudra Paket ERP",
    version="0.1.0",
    docs_url="/docs" if config.ENABLE_DOCS else None,
    redoc_url="/redoc" if config.ENABLE_DOCS else None,
    openapi_url="/openapi.json" if config.ENABLE_DOCS else None
)
app.state.limiter = limiter


class PrintTimings(TimingClient):
    def timing(self, metric_name, timing, tags):
        log.debug(dict(route=metric_name.removeprefix("main.samudra.features."), timing=timing, tags=tags))


app.add_middleware(TimingMiddleware, client=PrintTimings(), metric_namer=StarletteScopeToName("main", app))

if config.ENABLE_DOCS:
    log.warning("Docs enabled")
if config.ALLOW_ORIGIN:
    log.warning("Setting allow origin to %s", config.ALLOW_ORIGIN)
    origins = [config.ALLOW_ORIGIN]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def error_response(code: str, message: str, status_code: int) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(ApiError)
async def api_error_handler(_request: Request, exc: ApiError):
    if exc.status_code >= 500:
        log.error("Server error: %s", exc.message)
    return error_response(exc.code, exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        if "loc" not in error or "msg" not in error:
            continue
        key = error["loc"][-1] if error["loc"] else "body"
        errors.append(f"{key}: {error['msg']}")
    log.info("Request validation error %s", errors)
    return error_response("VALIDATION_ERROR", "; ".join(errors) or "Invalid request", 400)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
    return error_response(CODE_BY_STATUS.get(exc.status_code, SERVER_ERROR), str(exc.detail), exc.status_code)


@app.exception_handler(RateLimitExceeded)
def rate_limit_exceeded_handler(_request: Request, _exc: RateLimitExceeded) -> Response:
    return error_response("RATE_LIMITED", "You are going too fast", 429)


@app.exception_handler(Exception)
async def unhandled_exception_handler(_request: Request, exc: Exception):
    log.exception("Unhandled error", exc_info=exc)
    return error_response(SERVER_ERROR, "An unexpected error occurred", 500)


@app.on_event("startup")
async def startup():
    await init_db()


@app.on_event("shutdown")
async def shutdown():
    await close_db()
    log.info("Database connections closed")


@app.get("/")
async def root():
    return {
        "service": "Samudra Paket ERP RBAC",
        "version": app.version,
        "docs": "/docs" if config.ENABLE_DOCS else None,
        "resources": ["/permissions", "/roles"],
        "auth": "Bearer token carrying permission codes; ALL grants every permission",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(permission_router, prefix="/permissions", tags=["permissions"])
app.include_router(role_router, prefix="/roles", tags=["roles"])
