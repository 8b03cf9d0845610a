"""The relay pipeline: form parsing, payload assembly, upstream call and post-processing."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from pydantic import BaseModel
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from .auth import AuthContext
from .config import Settings
from .errors import BadRequest, UpstreamError
from .extraction import JSONExtractionError, extract_json_object
from .payload import FALLBACK_MIME_TYPE, Attachment, build_payload
from .prompts import PromptPreset
from .providers.openrouter import OpenRouterProvider
from .upstream import call_openrouter

logger = logging.getLogger("vision-relay")


class RelayRequest(BaseModel):
    prompt: str
    model: str
    expect_json: bool = False
    image: Optional[Attachment] = None
    pdf: Optional[Attachment] = None


async def read_form(request: Request) -> FormData:
    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" not in content_type:
        raise BadRequest("Content-Type must be multipart/form-data")
    try:
        return await request.form()
    except (MultiPartException, StarletteHTTPException) as exc:
        logger.warning(f"Failed to parse multipart body: {exc}")
        raise BadRequest("Malformed multipart/form-data body")


async def _read_attachment(form: FormData, field: str, settings: Settings) -> Optional[Attachment]:
    value = form.get(field)
    if value is None:
        return None
    if not isinstance(value, UploadFile):
        raise BadRequest(f"Field '{field}' must be a file")

    limit = settings.max_upload_bytes
    # size is set by Starlette while spooling the part
    if value.size is not None and value.size > limit:
        raise BadRequest(f"Field '{field}' exceeds {limit} bytes")

    data = await value.read(limit + 1)
    if not data:
        return None
    if len(data) > limit:
        raise BadRequest(f"Field '{field}' exceeds {limit} bytes")

    return Attachment(
        data=data,
        mime_type=value.content_type or FALLBACK_MIME_TYPE,
        filename=value.filename,
    )


def _text_field(form: FormData, field: str) -> Optional[str]:
    value = form.get(field)
    if isinstance(value, str):
        return value
    return None


async def parse_relay_form(
    form: FormData,
    settings: Settings,
    preset: Optional[PromptPreset] = None,
) -> RelayRequest:
    image = await _read_attachment(form, "image", settings)
    pdf = await _read_attachment(form, "pdf", settings)
    prompt = _text_field(form, "prompt")
    model = (_text_field(form, "model") or "").strip()

    if preset is None:
        if not prompt:
            raise BadRequest("Missing prompt field")
        return RelayRequest(
            prompt=prompt,
            model=model or settings.default_model,
            expect_json=_text_field(form, "expectJson") == "true",
            image=image,
            pdf=pdf,
        )

    if preset.requires_image and image is None:
        raise BadRequest("Missing image field")
    return RelayRequest(
        prompt=preset.render(extra_context=prompt),
        model=model or preset.model,
        expect_json=True,
        image=image,
        pdf=pdf,
    )


async def relay(relay_request: RelayRequest, settings: Settings, context: AuthContext) -> Dict[str, Any]:
    logger.info(
        "forwarding request",
        extra={
            "key_id": context.key_id,
            "model": relay_request.model,
            "has_image": relay_request.image is not None,
            "has_pdf": relay_request.pdf is not None,
            "expect_json": relay_request.expect_json,
        },
    )

    try:
        payload = build_payload(
            prompt=relay_request.prompt,
            model=relay_request.model,
            image=relay_request.image,
            pdf=relay_request.pdf,
        ).model_dump()
        upstream_response = await call_openrouter(payload=payload, settings=settings)
        content = OpenRouterProvider.extract_content(upstream_response)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error forwarding to upstream model service")
        raise UpstreamError()

    if not relay_request.expect_json:
        return {"response": content}

    try:
        extracted = extract_json_object(content)
    except JSONExtractionError as exc:
        logger.warning(f"Cannot extract JSON from upstream content: {exc}", extra={"key_id": context.key_id})
        raise UpstreamError("Invalid response from upstream model service: cannot extract any JSON")

    logger.info("extracted JSON object", extra={"key_id": context.key_id, "keys": sorted(extracted)})
    return extracted
