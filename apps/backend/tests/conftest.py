from __future__ import annotations

import io
import os
import sys
import time
from pathlib import Path
from typing import Callable

import jwt
import pytest
from pypdf import PdfWriter

BACKEND_ROOT = Path(__file__).resolve().parents[1]
PACKAGES_ROOT = BACKEND_ROOT.parents[1] / "packages"
for extra in (BACKEND_ROOT, PACKAGES_ROOT):
    if str(extra) not in sys.path:
        sys.path.append(str(extra))

JWT_SECRET = "pdfsuit-test-secret-with-enough-length-for-hs256"

os.environ["SUPABASE_JWT_SECRET"] = JWT_SECRET
os.environ["SUPABASE_URL"] = "https://project.supabase.co"
os.environ["SUPABASE_ANON_KEY"] = "anon-key"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_secret"
os.environ["RESEND_API_KEY"] = "re_test_key"
os.environ["CONTACT_EMAIL_TO"] = "owner@example.com, help@example.com"
os.environ["PDFSUIT_QPDF"] = "0"

from fastapi.testclient import TestClient  # noqa: E402

from app.auth.store import profile_store  # noqa: E402
from app.contact.routes import rate_limiter  # noqa: E402
from app.main import app  # noqa: E402


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


@pytest.fixture(autouse=True)
def _reset_state():
    profile_store.clear()
    rate_limiter.reset()
    yield
    profile_store.clear()
    rate_limiter.reset()


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture()
def token_factory() -> Callable[..., str]:
    return make_token


@pytest.fixture()
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture()
def small_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
