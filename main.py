"""
Screenshot Service - Main Application

A FastAPI backend for the client feedback tool that captures website
screenshots using Playwright, including password-protected hosted sites,
and returns them as PNG data URIs ready to be annotated.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from dotenv import load_dotenv
from browser_session import BrowserLauncher
from config import settings
from routes import router

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one Playwright driver for the whole process
    launcher = BrowserLauncher(settings)
    app.state.browser_launcher = launcher
    try:
        await launcher.start()
    except Exception as e:
        logger.error(f"❌ Failed to start Playwright driver, will retry on first request: {str(e)}")
    yield
    await launcher.stop()


# Initialize FastAPI app
app = FastAPI(title="Screenshot Service", lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    """Attach CORS headers to every response and answer every OPTIONS request empty"""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    response = await call_next(request)
    for key, value in CORS_HEADERS.items():
        response.headers.setdefault(key, value)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": str(exc.errors())},
    )


# Include all routes from routes.py
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, timeout_keep_alive=60)
