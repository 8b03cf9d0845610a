"""FastAPI relay that forwards images and PDFs with a prompt to a multimodal chat-completions API."""

from .main import app, create_app

__all__ = ["app", "create_app"]
