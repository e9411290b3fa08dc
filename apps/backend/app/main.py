"""FastAPI application exposing PDF utilities from the shared library."""

from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Callable, Iterable, List
from zipfile import ZipFile

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from pdfsuit import (
    Bookmark,
    ExternalEngineError,
    ImageInput,
    InputValidationError,
    SignaturePlacement,
    add_bookmarks,
    add_page_numbers,
    add_signature,
    add_text_signature,
    add_watermark,
    compress_pdf,
    delete_pages,
    edit_metadata,
    extract_bookmarks,
    extract_pages,
    images_to_pdf,
    merge_pdfs,
    protect_pdf,
    read_metadata,
    registry,
    rotate_pages,
    split_by_ranges,
    split_into_single_pages,
    unprotect_pdf,
)
from pdfsuit.core.document import load_reader, page_count
from pdfsuit.ocr import format_ocr_results, ocr_to_searchable_pdf, perform_ocr
from pdfsuit.pages import build_output_filename, parse_page_list, parse_page_ranges, to_zero_based

from .auth import RouteAccessMiddleware, auth_router, get_current_profile
from .auth.models import Profile
from .auth.store import profile_store
from .contact import contact_router
from .payments import payments_router
from .plans import get_plan
from .usage import tool_access

LOGGER = logging.getLogger("pdfsuit.backend")

app = FastAPI(title="PDFSuit API", version="1.0.0")
app.add_middleware(RouteAccessMiddleware)
app.include_router(auth_router)
app.include_router(payments_router)
app.include_router(contact_router)

DOCS_PREFIX = "/api"


@dataclass(frozen=True)
class Upload:
    """An uploaded file held in memory for the duration of one request."""

    name: str
    data: bytes
    content_type: str | None


class OCRPage(BaseModel):
    text: str
    page_number: int = Field(..., alias="pageNumber")
    confidence: float

    model_config = ConfigDict(populate_by_name=True)


class OCRResponse(BaseModel):
    results: List[OCRPage]
    text: str


def _safe_filename(filename: str | None, default: str) -> str:
    """Return a filesystem-safe filename derived from user input."""

    if not filename:
        return default

    candidate = Path(filename).name
    return candidate or default


async def _read_upload(upload: UploadFile, default: str = "document.pdf") -> Upload:
    """Read an uploaded file into memory, rejecting empty uploads."""

    contents = await upload.read()
    name = _safe_filename(upload.filename, default)
    if not contents:
        raise HTTPException(status_code=400, detail=f"File '{name}' is empty.")
    return Upload(name=name, data=contents, content_type=upload.content_type)


def _zip_outputs(files: Iterable[tuple[str, bytes]]) -> bytes:
    """Create an in-memory zip archive containing ``files``."""

    buffer = io.BytesIO()
    with ZipFile(buffer, "w") as archive:
        for name, data in files:
            archive.writestr(name, data)
    return buffer.getvalue()


def _parse_json(raw_value: str | None, *, field_name: str) -> Any:
    """Parse an optional JSON encoded multipart form field."""

    if raw_value is None:
        return None
    try:
        return json.loads(raw_value)
    except JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail=f"{field_name} must be valid JSON.") from exc


def _parse_pages(value: str, *, field_name: str = "pages") -> list[int]:
    try:
        pages = parse_page_list(value)
    except InputValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not pages:
        raise HTTPException(status_code=400, detail=f"'{field_name}' must contain at least one page.")
    return pages


async def _run_tool(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run a blocking library call off the event loop and map its errors to HTTP."""

    try:
        return await run_in_threadpool(func, *args, **kwargs)
    except InputValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ExternalEngineError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        LOGGER.exception("Unexpected failure in %s", getattr(func, "__name__", func))
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _file_response(data: bytes, filename: str, media_type: str = "application/pdf", **headers: str) -> Response:
    return Response(
        content=data,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"', **headers},
    )


def _stem(upload: Upload) -> str:
    return Path(upload.name).stem or "document"


@app.get("/health", response_class=JSONResponse)
async def health() -> dict[str, str]:
    """Lightweight health endpoint for uptime checks."""
    return {"status": "ok"}


@app.get(
    f"{DOCS_PREFIX}/openapi.json",
    include_in_schema=False,
    name="prefixed_openapi",
)
async def prefixed_openapi() -> JSONResponse:
    """Expose the OpenAPI schema under the gateway's ``/api`` prefix."""

    return JSONResponse(app.openapi())


@app.get(f"{DOCS_PREFIX}/docs", include_in_schema=False)
async def prefixed_swagger_ui(request: Request) -> HTMLResponse:
    """Serve Swagger UI from the same ``/api`` prefix used by the gateway."""

    return get_swagger_ui_html(
        openapi_url=str(request.url_for("prefixed_openapi")),
        title=f"{app.title} - Swagger UI",
    )


@app.get("/tools")
async def list_tools(profile: Profile = Depends(get_current_profile)) -> dict[str, list[str]]:
    """Return the identifiers of every registered tool."""

    return {"tools": list(registry.names())}


@app.get("/dashboard")
async def dashboard(profile: Profile = Depends(get_current_profile)) -> dict[str, Any]:
    """Summarise the caller's plan, credits and recent activity."""

    plan = get_plan(profile.plan_type)
    usage = profile_store.recent_usage(profile.id)
    return {
        "profile": profile.model_dump(mode="json"),
        "plan": {
            "key": plan.key,
            "name": plan.name,
            "priceGbp": plan.price_gbp,
            "credits": plan.credits,
            "maxFileSize": plan.max_file_size,
        },
        "recentUsage": [
            {
                "toolName": entry.tool_name,
                "fileSize": entry.file_size,
                "success": entry.success,
                "errorMessage": entry.error_message,
                "createdAt": entry.created_at.isoformat(),
            }
            for entry in usage
        ],
    }


@app.post("/tools/merge", summary="Merge PDFs in upload order")
async def merge_documents(
    files: List[UploadFile] = File(..., description="PDF files to merge, in order."),
    document_info: str | None = Form(
        None,
        description="Optional JSON encoded metadata to apply to the merged PDF.",
    ),
    bookmark_inputs: bool = Form(
        False,
        alias="add_bookmarks",
        description="When true, create a bookmark for each merged document.",
    ),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    """Merge multiple PDF uploads into a single document."""

    uploads = [await _read_upload(upload, f"document_{index}.pdf") for index, upload in enumerate(files, 1)]
    metadata = _parse_json(document_info, field_name="document_info")
    if metadata is not None and not isinstance(metadata, dict):
        raise HTTPException(status_code=400, detail="document_info must be a JSON object.")

    bookmarks = [_stem(upload) for upload in uploads] if bookmark_inputs else None
    async with tool_access.track(profile, "merge", [len(upload.data) for upload in uploads]):
        data = await _run_tool(
            merge_pdfs,
            [upload.data for upload in uploads],
            names=[upload.name for upload in uploads],
            document_info=metadata,
            bookmarks=bookmarks,
        )
    return _file_response(data, "merged.pdf")


def _split_archive(upload: Upload, ranges: str) -> bytes:
    total_pages = page_count(load_reader(upload.data, name=upload.name), name=upload.name)
    page_ranges = parse_page_ranges(ranges, total_pages=total_pages)
    documents = split_by_ranges(upload.data, page_ranges, name=upload.name)
    return _zip_outputs(
        (build_output_filename(_stem(upload), page_range), data)
        for page_range, data in zip(page_ranges, documents)
    )


@app.post(
    "/tools/split",
    summary="Split a PDF by page ranges",
    response_description="Zip archive with one PDF per range.",
)
async def split_ranges(
    file: UploadFile = File(..., description="Source PDF to split."),
    ranges: str = Form(..., description="Comma separated page ranges, e.g. '1-3,4-10'."),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    async with tool_access.track(profile, "split", [len(upload.data)]):
        archive = await _run_tool(_split_archive, upload, ranges)
    return _file_response(archive, f"{_stem(upload)}_split.zip", media_type="application/zip")


@app.post(
    "/tools/split/pages",
    summary="Split a PDF into single pages",
    response_description="Zip archive containing a PDF per page.",
)
async def split_pages(
    file: UploadFile = File(..., description="Source PDF to split into individual pages."),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    async with tool_access.track(profile, "split-pages", [len(upload.data)]):
        documents = await _run_tool(split_into_single_pages, upload.data, name=upload.name)
    archive = _zip_outputs(
        (build_output_filename(_stem(upload), number), data)
        for number, data in enumerate(documents, start=1)
    )
    return _file_response(archive, f"{_stem(upload)}_pages.zip", media_type="application/zip")


@app.post("/tools/extract", summary="Copy selected pages into a new PDF")
async def extract_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    pages: str = Form(..., description="Comma separated 1-based pages, e.g. '3,1,5-6'."),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    numbers = _parse_pages(pages)
    async with tool_access.track(profile, "extract", [len(upload.data)]):
        data = await _run_tool(extract_pages, upload.data, numbers, name=upload.name)
    return _file_response(data, f"{_stem(upload)}_extracted.pdf")


@app.post("/tools/delete", summary="Remove pages from a PDF")
async def delete_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    pages: str = Form(..., description="Comma separated 1-based pages to remove."),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    numbers = _parse_pages(pages)
    async with tool_access.track(profile, "delete", [len(upload.data)]):
        data = await _run_tool(delete_pages, upload.data, numbers, name=upload.name)
    return _file_response(data, f"{_stem(upload)}_edited.pdf")


@app.post("/tools/rotate", summary="Rotate pages clockwise")
async def rotate_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    rotation: int = Form(90, description="Clockwise rotation: 90, 180 or 270."),
    pages: str | None = Form(None, description="Optional comma separated 1-based pages; all when omitted."),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    indices = to_zero_based(_parse_pages(pages)) if pages else None
    async with tool_access.track(profile, "rotate", [len(upload.data)]):
        data = await _run_tool(rotate_pages, upload.data, rotation, indices, name=upload.name)
    return _file_response(data, f"{_stem(upload)}_rotated.pdf")


@app.post("/tools/watermark", summary="Stamp a text watermark on every page")
async def watermark_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    text: str = Form(..., description="Watermark text."),
    opacity: float = Form(0.3),
    rotation: float = Form(45),
    font_size: float = Form(50),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    async with tool_access.track(profile, "watermark", [len(upload.data)]):
        data = await _run_tool(
            add_watermark,
            upload.data,
            text,
            opacity=opacity,
            rotation=rotation,
            font_size=font_size,
            name=upload.name,
        )
    return _file_response(data, f"{_stem(upload)}_watermarked.pdf")


@app.post("/tools/page-numbers", summary="Number every page")
async def page_numbers_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    position: str = Form("bottom", description="'bottom' or 'top'."),
    font_size: float = Form(12),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    async with tool_access.track(profile, "page-numbers", [len(upload.data)]):
        data = await _run_tool(
            add_page_numbers,
            upload.data,
            position=position,
            font_size=font_size,
            name=upload.name,
        )
    return _file_response(data, f"{_stem(upload)}_numbered.pdf")


@app.post("/tools/compress", summary="Compress a PDF")
async def compress_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    quality: str = Form("medium", description="'low', 'medium' or 'high'."),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    async with tool_access.track(profile, "compress", [len(upload.data)]):
        result = await _run_tool(compress_pdf, upload.data, quality, name=upload.name)
    return _file_response(
        result.data,
        f"{_stem(upload)}_compressed.pdf",
        **{
            "X-PDFSuit-Original-Size": str(result.original_size),
            "X-PDFSuit-Compressed-Size": str(result.compressed_size),
            "X-PDFSuit-Compression-Backend": result.backend or "pypdf",
        },
    )


@app.post("/tools/image-to-pdf", summary="Combine PNG/JPEG images into a PDF")
async def image_to_pdf_endpoint(
    files: List[UploadFile] = File(..., description="Images, one page each, in order."),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    uploads = [await _read_upload(upload, f"image_{index}") for index, upload in enumerate(files, 1)]
    images = [ImageInput(name=upload.name, data=upload.data, content_type=upload.content_type) for upload in uploads]
    async with tool_access.track(profile, "image-to-pdf", [len(upload.data) for upload in uploads]):
        data = await _run_tool(images_to_pdf, images)
    return _file_response(data, "images.pdf")


def _log_progress(name: str) -> Callable[[int], None]:
    def report(percent: int) -> None:
        LOGGER.debug("OCR progress for %s: %d%%", name, percent)

    return report


def _content_type(upload: Upload) -> str | None:
    if upload.content_type in (None, "application/octet-stream"):
        return None
    return upload.content_type


@app.post("/tools/ocr", response_model=OCRResponse, response_model_by_alias=True, summary="Recognise text")
async def ocr_endpoint(
    file: UploadFile = File(..., description="PDF or PNG/JPEG image."),
    language: str | None = Form(None, description="Tesseract language code, e.g. 'eng'."),
    profile: Profile = Depends(get_current_profile),
) -> OCRResponse:
    upload = await _read_upload(file)
    async with tool_access.track(profile, "ocr", [len(upload.data)]):
        results = await _run_tool(
            perform_ocr,
            upload.data,
            language,
            _log_progress(upload.name),
            content_type=_content_type(upload),
            name=upload.name,
        )
    return OCRResponse(
        results=[
            OCRPage(text=result.text, pageNumber=result.page_number, confidence=result.confidence)
            for result in results
        ],
        text=format_ocr_results(results),
    )


@app.post("/tools/ocr/searchable", summary="Add an invisible text layer to a scan")
async def searchable_pdf_endpoint(
    file: UploadFile = File(..., description="Scanned PDF or image."),
    language: str | None = Form(None),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    async with tool_access.track(profile, "ocr-searchable", [len(upload.data)]):
        data = await _run_tool(
            ocr_to_searchable_pdf,
            upload.data,
            language,
            _log_progress(upload.name),
            content_type=_content_type(upload),
            name=upload.name,
        )
    return _file_response(data, f"{_stem(upload)}_searchable.pdf")


def _parse_bookmarks(raw_value: str) -> list[Bookmark]:
    payload = _parse_json(raw_value, field_name="bookmarks")
    if not isinstance(payload, list) or not payload:
        raise HTTPException(status_code=400, detail="bookmarks must be a non-empty JSON array.")
    bookmarks: list[Bookmark] = []
    for item in payload:
        if not isinstance(item, dict):
            raise HTTPException(status_code=400, detail="Each bookmark must be a JSON object.")
        page = item.get("pageNumber", item.get("page"))
        try:
            bookmarks.append(Bookmark(title=str(item.get("title") or ""), page_number=int(page)))
        except (TypeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail="Bookmark pages must be integers.") from exc
    return bookmarks


@app.post("/tools/bookmarks", summary="Add bookmarks to a PDF")
async def bookmarks_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    bookmarks: str = Form(..., description='JSON array, e.g. [{"title": "Intro", "pageNumber": 1}].'),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    entries = _parse_bookmarks(bookmarks)
    async with tool_access.track(profile, "bookmarks", [len(upload.data)]):
        data = await _run_tool(add_bookmarks, upload.data, entries, name=upload.name)
    return _file_response(data, f"{_stem(upload)}_bookmarked.pdf")


@app.post("/tools/bookmarks/extract", summary="List the bookmarks of a PDF")
async def extract_bookmarks_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    profile: Profile = Depends(get_current_profile),
) -> dict[str, list[dict[str, Any]]]:
    upload = await _read_upload(file)
    async with tool_access.track(profile, "bookmarks-extract", [len(upload.data)]):
        entries = await _run_tool(extract_bookmarks, upload.data, name=upload.name)
    return {"bookmarks": [{"title": entry.title, "pageNumber": entry.page_number} for entry in entries]}


@app.post("/tools/signature", summary="Place a signature image on one page")
async def signature_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    signature: UploadFile = File(..., description="PNG or JPEG signature image."),
    page_number: int = Form(1, description="1-based page to sign."),
    x: float = Form(0, description="Distance from the left edge in points."),
    y: float = Form(0, description="Distance from the top edge in points."),
    width: float = Form(150),
    height: float = Form(50),
    include_date: bool = Form(False, description="Write today's date under the signature."),
    date_format: str | None = Form(None, description="Pattern using DD, MM, YYYY or YY."),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    image = await _read_upload(signature, "signature.png")
    placement = SignaturePlacement(page_number=page_number, x=x, y=y, width=width, height=height)
    async with tool_access.track(profile, "signature", [len(upload.data), len(image.data)]):
        data = await _run_tool(
            add_signature,
            upload.data,
            ImageInput(name=image.name, data=image.data, content_type=_content_type(image)),
            placement,
            include_date=include_date,
            date_format=date_format,
            name=upload.name,
        )
    return _file_response(data, f"{_stem(upload)}_signed.pdf")


@app.post("/tools/signature/text", summary="Type a signature on one page")
async def text_signature_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    text: str = Form(..., description="Signature text."),
    page_number: int = Form(1, description="1-based page to sign."),
    x: float = Form(0, description="Distance from the left edge in points."),
    y: float = Form(0, description="Distance from the top edge in points."),
    font_size: float = Form(24),
    colour: str = Form("#000000", description="Text colour as #RRGGBB."),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    placement = SignaturePlacement(page_number=page_number, x=x, y=y)
    async with tool_access.track(profile, "signature", [len(upload.data)]):
        data = await _run_tool(
            add_text_signature,
            upload.data,
            text,
            placement,
            font_size=font_size,
            colour=colour,
            name=upload.name,
        )
    return _file_response(data, f"{_stem(upload)}_signed.pdf")


@app.post("/tools/metadata", summary="Set title, author, subject or keywords")
async def metadata_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    title: str | None = Form(None),
    author: str | None = Form(None),
    subject: str | None = Form(None),
    keywords: str | None = Form(None),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    fields = {"title": title, "author": author, "subject": subject, "keywords": keywords}
    async with tool_access.track(profile, "metadata", [len(upload.data)]):
        data = await _run_tool(edit_metadata, upload.data, fields, name=upload.name)
    return _file_response(data, f"{_stem(upload)}_metadata.pdf")


@app.post("/tools/metadata/extract", summary="Read the document information of a PDF")
async def extract_metadata_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    profile: Profile = Depends(get_current_profile),
) -> dict[str, dict[str, str]]:
    upload = await _read_upload(file)
    async with tool_access.track(profile, "metadata-extract", [len(upload.data)]):
        metadata = await _run_tool(read_metadata, upload.data, name=upload.name)
    return {"metadata": metadata}


@app.post("/tools/protect", summary="Encrypt a PDF with a password")
async def protect_endpoint(
    file: UploadFile = File(..., description="Source PDF."),
    password: str = Form(..., description="Password required to open the PDF."),
    owner_password: str | None = Form(None, description="Optional owner password."),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    async with tool_access.track(profile, "protect", [len(upload.data)]):
        data = await _run_tool(protect_pdf, upload.data, password, owner_password=owner_password, name=upload.name)
    return _file_response(data, f"{_stem(upload)}_protected.pdf")


@app.post("/tools/unlock", summary="Remove password protection")
async def unlock_endpoint(
    file: UploadFile = File(..., description="Encrypted PDF."),
    password: str = Form(..., description="Password of the PDF."),
    profile: Profile = Depends(get_current_profile),
) -> Response:
    upload = await _read_upload(file)
    async with tool_access.track(profile, "unlock", [len(upload.data)]):
        data = await _run_tool(unprotect_pdf, upload.data, password, name=upload.name)
    return _file_response(data, f"{_stem(upload)}_unlocked.pdf")


__all__ = ["app"]
