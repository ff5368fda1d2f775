"""
FastAPI service for the cat / dog recognizer.

Endpoints:
  GET  /health   → Health check
  POST /predict  → Classify an uploaded image as cat, dog or neither
  GET  /metrics  → Prometheus metrics
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from app.schemas import HealthResponse, PredictionResponse
from catdog.config import get_settings
from catdog.errors import LoadError, PreprocessError
from catdog.loader import load_model
from catdog.pipeline import classify, load_image

# ── Structured JSON-like logging ─────────────────────────────────────────────
logging.basicConfig(
    level=get_settings().log_level,
    format='{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}',
)
logger = logging.getLogger("catdog-api")

# ── Prometheus Metrics ────────────────────────────────────────────────────────
REQUEST_COUNT = Counter(
    "catdog_request_total",
    "Total number of requests",
    ["endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "catdog_request_latency_seconds",
    "Request latency in seconds",
    ["endpoint"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)
PREDICTION_LABELS = Counter(
    "catdog_prediction_label_total",
    "Count of predicted labels",
    ["label"],
)

IMAGE_CONTENT_TYPES = ("image/jpeg", "image/png", "image/jpg", "image/webp")


# ── App lifespan (load model once) ───────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(f"Loading model {settings.model_asset}...")
    try:
        app.state.handle = load_model(settings.model_asset, cache_dir=settings.cache_dir)
    except LoadError as e:
        # No model, no service
        logger.error(f"Failed to load model: {e}")
        raise
    logger.info("Model loaded successfully")
    yield
    app.state.handle = None
    logger.info("Shutting down")


app = FastAPI(
    title="Cat / Dog Recognizer API",
    description="Tells whether a photo shows a cat, a dog, or neither.",
    version="1.0.0",
    lifespan=lifespan,
)


# ── Endpoints ─────────────────────────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(request: Request):
    """Health check endpoint: returns service and model status."""
    handle = getattr(request.app.state, "handle", None)
    REQUEST_COUNT.labels(endpoint="/health", status="200").inc()
    return HealthResponse(
        status="ok",
        model_loaded=handle is not None,
        artifact=handle.name if handle is not None else None,
    )


@app.post("/predict", response_model=PredictionResponse, tags=["Inference"])
async def predict(request: Request, file: UploadFile = File(..., description="Image file (jpg/png)")):
    """
    Accept an image upload and return cat / dog / neither.

    - **file**: Image file (JPEG or PNG recommended)
    """
    start = time.time()

    handle = getattr(request.app.state, "handle", None)
    if handle is None:
        REQUEST_COUNT.labels(endpoint="/predict", status="503").inc()
        raise HTTPException(status_code=503, detail="Model not loaded")

    if file.content_type not in IMAGE_CONTENT_TYPES:
        REQUEST_COUNT.labels(endpoint="/predict", status="400").inc()
        raise HTTPException(status_code=400, detail="File must be an image (JPEG/PNG/WebP)")

    try:
        contents = await file.read()
        # Decoding and the forward pass are blocking; keep them off the event loop
        image = await run_in_threadpool(load_image, contents)
        result = await run_in_threadpool(classify, handle, image)
    except PreprocessError as e:
        REQUEST_COUNT.labels(endpoint="/predict", status="400").inc()
        raise HTTPException(status_code=400, detail=f"Cannot read image: {e}")

    latency = time.time() - start
    REQUEST_COUNT.labels(endpoint="/predict", status="200").inc()
    REQUEST_LATENCY.labels(endpoint="/predict").observe(latency)
    PREDICTION_LABELS.labels(label=result.label).inc()

    logger.info(
        f"predict | label={result.label} "
        f"confidence={result.confidence} "
        f"latency={latency:.3f}s "
        f"file={file.filename}"
    )

    return PredictionResponse(
        label=result.label,
        confidence=result.confidence,
        dog_percentage=result.dog_percentage,
        message=result.message,
    )


@app.get("/metrics", tags=["System"], include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint."""
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
