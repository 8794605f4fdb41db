import asyncio
from fastapi import FastAPI
from pawhub.core.config import get_settings
from pawhub.api.api_v1 import user_router, auth_router
from pawhub.api.v1.auth import limiter
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pawhub.core.exceptions import AppException
import logging
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from contextlib import asynccontextmanager
from pawhub.tasks.cleanup_tokens import cleanup_expired_tokens


settings = get_settings()

# Logger setup
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def periodic_cleanup(interval_seconds: int = 86400):
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await cleanup_expired_tokens()
        except Exception:
            logger.exception("Refresh token cleanup failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up the %s API...", settings.PROJECT_NAME)
    task = asyncio.create_task(periodic_cleanup())
    yield
    task.cancel()
    logger.info("Shutting down the %s API...", settings.PROJECT_NAME)


app = FastAPI(lifespan=lifespan, title=f"{settings.PROJECT_NAME} API", version="1.0.0")

# CORS setup (credentials on, so the refresh cookie can travel)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Rate Limiting setup
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Include API routers
app.include_router(auth_router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(user_router, prefix="/api/v1/users", tags=["Users"])

# Global exception handler
@app.exception_handler(AppException)
async def app_exception_handler(request, exc: AppException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )


@app.get("/")
def read_root():
    return {"status": "Green", "message": f"The {settings.PROJECT_NAME} API is alive!"}
