import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .deps import get_settings
from .routers import ai, health, redact, scan

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# API metadata for OpenAPI documentation
description = """
## Phish Shield API

Local, deterministic triage for suspected phishing and social-engineering
messages, with an optional second opinion from a generative model.

### Key Features

* **Heuristics:** urgency/credential/financial vocabulary, ALL CAPS and
  punctuation bursts, link analysis with brand-lookalike detection
* **Privacy-First:** PII is redacted before any external call; raw PII is
  never returned
* **Explainable:** every point of the 0-100 score comes from a listed signal
* **Fail-safe:** the remote opinion can only raise the verdict and is never
  required

### Quick Start

1. **Health Check:** `GET /health`
2. **Heuristic Scan:** `POST /scan` (offline, no API key needed)
3. **Redaction Preview:** `POST /redact`
4. **Full Analysis:** `POST /ai/analyze` (uses OPENAI_API_KEY when set)
"""

app = FastAPI(
    title="Phish Shield API",
    description=description,
    version="0.1.0",
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "health",
            "description": "Service health and AI configuration status",
        },
        {
            "name": "scan",
            "description": "Deterministic message risk heuristics (no AI, no API key required)",
        },
        {
            "name": "redact",
            "description": "PII redaction preview shown before anything is shared",
        },
        {
            "name": "ai",
            "description": "Heuristics combined with an optional remote model assessment",
        },
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(scan.router, prefix="/scan", tags=["scan"])
app.include_router(redact.router, prefix="/redact", tags=["redact"])
app.include_router(ai.router, prefix="/ai", tags=["ai"])
