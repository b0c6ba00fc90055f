"""ASGI entry point for the subway lines backend.

Serves the FastAPI app from the repository root without installing the
package first:

  uvicorn asgi:app --reload

"""
import os
import sys

# backend/ holds the `app` package
ROOT = os.path.dirname(os.path.abspath(__file__))
BACKEND_PATH = os.path.join(ROOT, "backend")
if BACKEND_PATH not in sys.path:
    sys.path.insert(0, BACKEND_PATH)

from app.main import app  # noqa: E402,F401
