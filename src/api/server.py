"""
textseal - HTTP API

Exposes the text operations over HTTP. Message data travels as UTF-8 text;
keys are referenced by file name inside KEY_STORAGE_PATH and never leave the
server.

Endpoints:
- GET  /health         - Liveness and supported formats (no auth)
- POST /sign           - Sign data
- POST /verify         - Verify a signature
- POST /encrypt        - Encrypt data into a text envelope
- POST /decrypt        - Decrypt a text envelope
- POST /keys/generate  - Generate fresh signing keys (returned, not stored)
"""

import io
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import structlog
from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from core.b64 import urlsafe_encode
from core.config import Settings
from core.exceptions import (
    AuthenticationFailedError,
    MalformedInputError,
    SourceReadError,
    TextSealError,
    UnknownAlgorithmError,
    UnsupportedOperationError,
)
from sealing.keys import KeyStore
from sealing.registry import (
    available_formats,
    get_sign_algorithm,
    load_cipher,
    load_signer,
    load_verifier,
)

logger = structlog.get_logger()

VERSION = "0.1.0"


# ============================================================================
# Pydantic Models
# ============================================================================

class SignRequest(BaseModel):
    """Request to sign data."""
    data: str = Field(..., description="Message text")
    key: str = Field(..., description="Key file name inside the key directory")
    format: str = Field(default="blake3", description="blake3 or ed25519")


class SignResponse(BaseModel):
    signature: str
    format: str


class VerifyRequest(BaseModel):
    """Request to verify a signature."""
    data: str
    key: str = Field(..., description="Shared key (blake3) or public key (ed25519) file name")
    signature: str = Field(..., description="URL-safe base64 signature")
    format: str = Field(default="blake3")


class VerifyResponse(BaseModel):
    valid: bool
    format: str


class EncryptRequest(BaseModel):
    data: str
    key: str
    format: str = Field(default="chacha20poly1305")


class EncryptResponse(BaseModel):
    envelope: str
    format: str


class DecryptRequest(BaseModel):
    envelope: str
    key: str
    format: str = Field(default="chacha20poly1305")


class DecryptResponse(BaseModel):
    data: str
    format: str


class GenerateKeyRequest(BaseModel):
    format: str = Field(default="blake3")


class GenerateKeyResponse(BaseModel):
    format: str
    files: List[str]
    keys: List[str] = Field(..., description="URL-safe base64 key buffers, same order as files")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    formats: Dict[str, List[str]]
    uptime_seconds: float


# ============================================================================
# Application State
# ============================================================================

class AppState:
    """Application state container."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()
        self.key_store = KeyStore()
        self.start_time = datetime.now(timezone.utc)

    def key_path(self, name: str) -> Path:
        """Resolve a key file name inside the key directory."""
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise HTTPException(status_code=400, detail=f"Invalid key name: {name!r}")
        return self.settings.key_storage_path / name


app_state: Optional[AppState] = None


# ============================================================================
# Application Factory
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    global app_state
    app_state = AppState()
    logger.info("textseal_api_starting", version=VERSION,
                key_dir=str(app_state.settings.key_storage_path))
    yield
    logger.info("textseal_api_stopping")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = Settings.from_env()
    application = FastAPI(
        title="textseal",
        description="Keyed digests, Ed25519 signatures and authenticated encryption for text.",
        version=VERSION,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return application


app = create_app()


# ============================================================================
# Dependencies
# ============================================================================

def get_state() -> AppState:
    """Get application state."""
    if app_state is None:
        raise HTTPException(status_code=503, detail="Application not initialized")
    return app_state


def verify_api_key(
    x_api_key: str = Header(..., alias="X-API-Key"),
    state: AppState = Depends(get_state),
) -> str:
    """Verify API key."""
    if x_api_key != state.settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return x_api_key


def _http_error(exc: TextSealError) -> HTTPException:
    """Map a textseal error to an HTTP error."""
    if isinstance(exc, (UnknownAlgorithmError, MalformedInputError,
                        AuthenticationFailedError, UnsupportedOperationError)):
        status = 400
    elif isinstance(exc, SourceReadError):
        status = 404
    else:
        # MalformedKeyError: a bad key file is a server-side problem
        status = 500
    logger.warning("request_failed", error_type=type(exc).__name__, status=status)
    return HTTPException(status_code=status, detail=str(exc))


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(state: AppState = Depends(get_state)):
    """Health check endpoint."""
    uptime = (datetime.now(timezone.utc) - state.start_time).total_seconds()
    return HealthResponse(
        status="healthy",
        version=VERSION,
        formats=available_formats(),
        uptime_seconds=uptime,
    )


@app.post("/sign", response_model=SignResponse, tags=["Signing"])
def sign_data(
    request: SignRequest,
    state: AppState = Depends(get_state),
    api_key: str = Depends(verify_api_key),
):
    """Sign data with a keyed digest or an Ed25519 private key."""
    try:
        signer = load_signer(request.format, state.key_path(request.key), state.key_store)
        signature = signer.sign_b64(io.BytesIO(request.data.encode("utf-8")))
    except TextSealError as e:
        raise _http_error(e)
    return SignResponse(signature=signature, format=signer.algorithm.value)


@app.post("/verify", response_model=VerifyResponse, tags=["Signing"])
def verify_data(
    request: VerifyRequest,
    state: AppState = Depends(get_state),
    api_key: str = Depends(verify_api_key),
):
    """
    Verify a signature.

    A mismatch is a normal response with valid=false; only malformed input
    is an error.
    """
    try:
        verifier = load_verifier(request.format, state.key_path(request.key), state.key_store)
        valid = verifier.verify_b64(io.BytesIO(request.data.encode("utf-8")), request.signature)
    except TextSealError as e:
        raise _http_error(e)
    return VerifyResponse(valid=valid, format=verifier.algorithm.value)


@app.post("/encrypt", response_model=EncryptResponse, tags=["Encryption"])
def encrypt_data(
    request: EncryptRequest,
    state: AppState = Depends(get_state),
    api_key: str = Depends(verify_api_key),
):
    """Encrypt data into a text envelope."""
    try:
        cipher = load_cipher(request.format, state.key_path(request.key), state.key_store)
        envelope = cipher.encrypt(io.BytesIO(request.data.encode("utf-8")))
    except TextSealError as e:
        raise _http_error(e)
    return EncryptResponse(envelope=envelope.decode("ascii"), format=cipher.algorithm.value)


@app.post("/decrypt", response_model=DecryptResponse, tags=["Encryption"])
def decrypt_data(
    request: DecryptRequest,
    state: AppState = Depends(get_state),
    api_key: str = Depends(verify_api_key),
):
    """Decrypt a text envelope. The plaintext must be UTF-8."""
    try:
        cipher = load_cipher(request.format, state.key_path(request.key), state.key_store)
        plaintext = cipher.decrypt(io.BytesIO(request.envelope.encode("utf-8")))
    except TextSealError as e:
        raise _http_error(e)
    try:
        data = plaintext.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=422, detail="Plaintext is not UTF-8 text")
    return DecryptResponse(data=data, format=cipher.algorithm.value)


@app.post("/keys/generate", response_model=GenerateKeyResponse, tags=["Keys"])
def generate_keys(
    request: GenerateKeyRequest,
    state: AppState = Depends(get_state),
    api_key: str = Depends(verify_api_key),
):
    """Generate keys for a signing format. Nothing is written on the server."""
    try:
        algorithm = get_sign_algorithm(request.format)
        keys = state.key_store.generate(algorithm.signing_key)
    except TextSealError as e:
        raise _http_error(e)
    return GenerateKeyResponse(
        format=algorithm.format.value,
        files=list(algorithm.key_files),
        keys=[urlsafe_encode(k) for k in keys],
    )
