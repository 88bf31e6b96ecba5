# backend/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import get_settings
from db import get_redis, test_connection
from routes import auth, candidates, interview
from utils.errors import InterviewError
from utils.logger import get_logger, setup_logging

setup_logging()
log = get_logger(__name__)
settings = get_settings()

API_PREFIX = "/api"
VERSION = "1.0.0"

app = FastAPI(
    title="AI Interview Assistant API",
    version=VERSION,
    description="Resume upload, AI-generated questions, timed answers and AI scoring",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(interview.router, prefix=API_PREFIX)
app.include_router(candidates.router, prefix=API_PREFIX)


@app.exception_handler(InterviewError)
async def interview_error_handler(request: Request, exc: InterviewError):
    if exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.on_event("startup")
async def startup_event():
    """Startup tasks"""
    log.info(f"🚀 Starting AI Interview Assistant v{VERSION}")

    if await test_connection(get_redis()):
        log.info("✅ Redis connected")
    else:
        log.warning("⚠️ Redis connection failed")

    ai = settings.ai_config()
    log.info(f"AI provider: {ai.provider} (requireAI={ai.require_ai})")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    log.info("🛑 Shutting down...")
    await get_redis().aclose()
    log.info("✅ Shutdown complete")


@app.get("/")
async def root():
    return {
        "message": f"AI Interview Assistant v{VERSION}",
        "status": "operational",
        "docs": "/docs",
    }


@app.get(f"{API_PREFIX}/health")
async def health_check():
    """Health check"""
    return {
        "status": "OK",
        "message": "Server is running",
        "version": VERSION,
        "aiProvider": settings.ai_provider,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
