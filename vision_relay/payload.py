"""Chat-completions payload assembly for multimodal requests."""

from __future__ import annotations

import base64
from typing import List, Literal, Optional, Union

from pydantic import BaseModel

PDF_MIME_TYPE = "application/pdf"
FALLBACK_MIME_TYPE = "application/octet-stream"


class Attachment(BaseModel):
    data: bytes
    mime_type: str
    filename: Optional[str] = None


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageUrlBlock(BaseModel):
    # PDFs travel in the same block type, only the data URI differs
    type: Literal["image_url"] = "image_url"
    image_url: str


ContentBlock = Union[TextBlock, ImageUrlBlock]


class UserMessage(BaseModel):
    role: Literal["user"] = "user"
    content: List[ContentBlock]


class ChatPayload(BaseModel):
    model: str
    messages: List[UserMessage]


def encode_data_uri(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or FALLBACK_MIME_TYPE};base64,{encoded}"


def build_payload(
    prompt: str,
    model: str,
    image: Optional[Attachment] = None,
    pdf: Optional[Attachment] = None,
) -> ChatPayload:
    """
    Build the upstream payload.

    Content order is fixed: the prompt text, then the image, then the PDF.
    """
    content: List[ContentBlock] = [TextBlock(text=prompt)]
    if image is not None:
        content.append(ImageUrlBlock(image_url=encode_data_uri(image.data, image.mime_type)))
    if pdf is not None:
        content.append(ImageUrlBlock(image_url=encode_data_uri(pdf.data, PDF_MIME_TYPE)))
    return ChatPayload(model=model, messages=[UserMessage(content=content)])
