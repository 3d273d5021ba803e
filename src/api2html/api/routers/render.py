from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import HTMLResponse

from ...config import AppConfig
from ...core import RenderService
from ...errors import Api2HtmlError, CollaboratorError, OutputError
from ...languages import DEFAULT_LANGUAGES
from ...models import CliOptions
from ...options import translate_options
from ..dependencies import get_config, get_service
from ..schemas import ErrorResponse

router = APIRouter(tags=["render"])


@router.post(
    "/render",
    summary="Render an OpenAPI document to HTML",
    response_class=HTMLResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def render_document(
    file: UploadFile = File(...),
    languages: Optional[str] = Form(None),
    theme: Optional[str] = Form(None),
    search: Optional[bool] = Form(None),
    summary: bool = Form(False),
    raw: bool = Form(False),
    omit_body: bool = Form(False),
    service: RenderService = Depends(get_service),
    config: AppConfig = Depends(get_config),
) -> HTMLResponse:
    content = await file.read()
    _enforce_size_limit(content, config)
    suffix = Path(file.filename or "upload.yaml").suffix or ".yaml"
    with tempfile.TemporaryDirectory() as workdir:
        source = Path(workdir) / f"source{suffix}"
        output = Path(workdir) / "index.html"
        source.write_bytes(content)
        cli_options = CliOptions(
            source=source,
            out=output,
            theme=theme,
            languages=languages,
            search=config.defaults.search if search is None else search,
            summary=summary or config.defaults.summary,
            raw=raw or config.defaults.raw,
            omit_body=omit_body or config.defaults.omit_body,
        )
        try:
            translated = translate_options(cli_options, DEFAULT_LANGUAGES, config.defaults)
            await service.run(source, output, translated)
        except (CollaboratorError, OutputError) as exc:
            raise HTTPException(status_code=500, detail={"code": exc.code, "message": str(exc)}) from exc
        except Api2HtmlError as exc:
            raise HTTPException(status_code=400, detail={"code": exc.code, "message": str(exc)}) from exc
        page = output.read_text(encoding="utf-8")
    return HTMLResponse(content=page)


def _enforce_size_limit(payload: bytes, config: AppConfig) -> None:
    max_bytes = config.runtime.max_file_size_mb * 1024 * 1024
    if len(payload) > max_bytes:
        raise HTTPException(status_code=413, detail="SIZE_LIMIT")


__all__ = ["router"]
