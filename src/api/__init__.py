"""
textseal - API Module

FastAPI server exposing:
- Keyed-digest and Ed25519 signing/verification
- ChaCha20-Poly1305 text envelopes
- Signing key generation
"""

from .server import app, create_app

__all__ = ["app", "create_app"]
