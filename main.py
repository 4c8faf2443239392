import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from jlpt_tryout.core.config import settings
from jlpt_tryout.core.exceptions import TryoutError
from jlpt_tryout.core.logging import configure_logging
from jlpt_tryout.endpoints import calculator, tryout
from jlpt_tryout.middleware.exceptions import (
    global_exception_handler,
    http_exception_handler,
    tryout_exception_handler,
    validation_exception_handler,
)
from jlpt_tryout.middleware.logging import RequestLoggingMiddleware
from jlpt_tryout.models import all_models  # noqa: F401
from jlpt_tryout.schemas.response import APIResponse, HealthStatus

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(TryoutError, tryout_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.include_router(tryout.router, prefix="/tryout", tags=["Tryout"])
app.include_router(calculator.router, prefix="/calculator", tags=["Calculator"])

@app.get("/health", response_model=APIResponse[HealthStatus], tags=["Health"])
async def health():
    return APIResponse(
        message="Service is healthy",
        data=HealthStatus(
            status="ok",
            version=settings.VERSION,
            scoring_config_version=settings.SCORING_CONFIG_VERSION
        )
    )

@app.on_event("startup")
async def startup_event():
    configure_logging()
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started with scoring config {settings.SCORING_CONFIG_VERSION}")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
