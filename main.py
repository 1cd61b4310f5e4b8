from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables before config is read
load_dotenv()

from huematch import __version__
from huematch.api.v1 import router as v1_router
from huematch.config import config
from huematch.schemas import HealthResponse
from huematch.utils.logging import get_logger

logger = get_logger()

app = FastAPI(
    title="HueMatch Palette Backend",
    description="Dominant color extraction and color-theory pairing suggestions",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"]
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse(ok=True, version=__version__, service="huematch")


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "HueMatch Palette API",
        "version": __version__,
        "docs": "/docs"
    }


logger.info("HueMatch backend ready", extra={
    "version": __version__,
    "store_backend": config.STORE_BACKEND
})
