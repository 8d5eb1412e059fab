from fastapi import FastAPI, APIRouter, Request
from fastapi.exceptions import RequestValidationError
from starlette.middleware.cors import CORSMiddleware
import logging

from config import CORS_ORIGINS, LOG_LEVEL
from database import client, create_indexes
from middleware import EdgeMiddleware
from models.order import validation_message
from routers import orders_router, analytics_router, exports_router
from routers.envelope import failure
from services.errors import OrderError, StoreError
from services.rate_limiter import RateLimiter
from services.scheduler import start_scheduler, stop_scheduler, get_scheduler_status

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create the main app
app = FastAPI(title="Order Capture API", version="1.0.0")

# Create main API router with /api prefix
api_router = APIRouter(prefix="/api")

api_router.include_router(orders_router)
api_router.include_router(analytics_router)
api_router.include_router(exports_router)


# Root endpoint
@api_router.get("/")
async def root():
    return {"message": "Order Capture API", "status": "running", "scheduler": get_scheduler_status()}


app.include_router(api_router)

# ============== Error handling ==============


@app.exception_handler(OrderError)
async def order_error_handler(request: Request, exc: OrderError):
    if isinstance(exc, StoreError):
        logger.error(f"Store error on {request.method} {request.url.path}")
    return failure(exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return failure(validation_message(exc.errors()), 400)


# ============== Middleware ==============

# Process-local; see services/rate_limiter.py
rate_limiter = RateLimiter()
app.state.rate_limiter = rate_limiter

app.add_middleware(EdgeMiddleware, limiter=rate_limiter)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup():
    await create_indexes()
    start_scheduler(rate_limiter)


@app.on_event("shutdown")
async def shutdown_db_client():
    stop_scheduler()
    client.close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
