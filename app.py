import os
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from dotenv import load_dotenv

# Load environment variables before the integrations read them
load_dotenv()

# Import our modules
from routes import analytics, business, chatbot, images, leads, marketing, websites
from tools.llm import llm_client
from tools.ratelimit import rate_limiter
from tools.documents import StorageError, document_store

# Configure logging
logger.add("logs/app.log", rotation="1 day", retention="7 days", level="INFO")

UPLOADS_DIR = os.getenv("UPLOADS_DIR", "uploads")
os.makedirs(UPLOADS_DIR, exist_ok=True)

# Initialize FastAPI app
app = FastAPI(
    title="AI Business Toolkit API",
    description="AI-generated websites, marketing, chatbot, analytics and images for small businesses",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[os.getenv("CLIENT_URL", "http://localhost:3001")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def rate_limit(request: Request, call_next):
    """Per-client fixed-window limit on API calls."""
    if request.url.path.startswith("/api/"):
        client_id = request.client.host if request.client else "unknown"
        if not rate_limiter.hit(client_id):
            logger.warning(f"Rate limit exceeded for {client_id}")
            return JSONResponse(
                status_code=429,
                content={"status": "error", "message": "Too many requests from this IP, please try again later."}
            )
    return await call_next(request)

for module in (business, websites, marketing, leads, chatbot, analytics, images):
    app.include_router(module.router, prefix="/api")

app.mount("/uploads", StaticFiles(directory=UPLOADS_DIR), name="uploads")

@app.get("/api/health")
def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": "1.0.0",
        "services": {
            "redis": "connected" if document_store.r else "disconnected",
            "llm": "mock" if not llm_client.api_key else "configured",
            "workflow": "ready"
        }
    }

# Error handlers
@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content={"status": "error", "message": "Storage temporarily unavailable"}
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": "Internal server error"}
    )

if __name__ == "__main__":
    import uvicorn

    # Create logs directory if it doesn't exist
    os.makedirs("logs", exist_ok=True)

    logger.info("Starting AI Business Toolkit API")

    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "5001")),
        reload=True,
        log_level="info"
    )
