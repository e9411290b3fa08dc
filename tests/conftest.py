from __future__ import annotations

import io
import os
import sys
import time
from pathlib import Path
from typing import Callable, Sequence

import jwt
import pytest
from PIL import Image
from pypdf import PdfReader, PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
for extra in (PROJECT_ROOT / "packages", PROJECT_ROOT / "apps" / "backend"):
    if str(extra) not in sys.path:
        sys.path.insert(0, str(extra))

JWT_SECRET = "pdfsuit-test-secret-with-enough-length-for-hs256"

os.environ["SUPABASE_JWT_SECRET"] = JWT_SECRET
os.environ["SUPABASE_URL"] = "https://project.supabase.co"
os.environ["SUPABASE_ANON_KEY"] = "anon-key"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_secret"
os.environ["RESEND_API_KEY"] = "re_test_key"
os.environ["CONTACT_EMAIL_TO"] = "owner@example.com, help@example.com"
os.environ["PDFSUIT_QPDF"] = "0"


def build_pdf(page_count: int = 3, *, title: str | None = None) -> bytes:
    """Return a PDF whose page ``n`` (1-based) is ``100 + n`` points wide."""

    writer = PdfWriter()
    for number in range(1, page_count + 1):
        writer.add_blank_page(width=100 + number, height=200)
    if title is not None:
        writer.add_metadata({"/Title": title})
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page_widths(data: bytes) -> list[int]:
    """Identify pages of a :func:`build_pdf` document by their width."""

    reader = PdfReader(io.BytesIO(data))
    return [int(float(page.mediabox.width)) for page in reader.pages]


def build_image(fmt: str = "PNG", size: tuple[int, int] = (40, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=fmt)
    return buffer.getvalue()


def make_token(
    user_id: str = "user-1",
    email: str | None = "user@example.com",
    *,
    secret: str = JWT_SECRET,
    expires_in: int = 3600,
    audience: str = "authenticated",
) -> str:
    now = int(time.time())
    claims = {
        "sub": user_id,
        "email": email,
        "aud": audience,
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture()
def pdf_bytes() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture()
def widths() -> Callable[[bytes], list[int]]:
    return page_widths


@pytest.fixture()
def image_bytes() -> Callable[..., bytes]:
    return build_image


@pytest.fixture()
def token_factory() -> Callable[..., str]:
    return make_token


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    pdf_path.write_bytes(build_pdf(5, title="Sample"))
    return pdf_path


@pytest.fixture()
def empty_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "empty.pdf"
    writer = PdfWriter()
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, page_count: int = 1, title: str | None = None) -> Path:
        path = tmp_path / filename
        path.write_bytes(build_pdf(page_count, title=title))
        return path

    return _create


@pytest.fixture()
def sample_pdfs(pdf_factory: Callable[..., Path]) -> Sequence[Path]:
    pdf1 = pdf_factory("one.pdf", 2, title="Document One")
    pdf2 = pdf_factory("two.pdf", 3)
    return [pdf1, pdf2]


@pytest.fixture()
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}


