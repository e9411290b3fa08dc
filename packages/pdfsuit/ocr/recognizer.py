"""Tesseract based text recognizer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from statistics import fmean
from types import TracebackType
from typing import Mapping, Protocol, Sequence

import pytesseract
from PIL import Image

from ..core.exceptions import ExternalEngineError

LOGGER = logging.getLogger("pdfsuit.ocr")


@dataclass(frozen=True)
class Recognition:
    """Text recognised in a single image and the engine's mean confidence (0-100)."""

    text: str
    confidence: float


class Recognizer(Protocol):
    """A recognizer is acquired with ``with`` and released on every exit path."""

    def __enter__(self) -> "Recognizer": ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    def recognize(self, image: Image.Image, *, name: str | None = None) -> Recognition: ...


def recognition_from_data(data: Mapping[str, Sequence[object]]) -> Recognition:
    """Assemble a :class:`Recognition` from ``pytesseract.image_to_data`` output.

    Words are grouped back into lines using Tesseract's block, paragraph and
    line numbers. Entries with a negative confidence are layout boxes, not
    words, and are ignored.
    """

    lines: dict[tuple[int, int, int], list[str]] = {}
    confidences: list[float] = []
    for index, word in enumerate(data.get("text", [])):
        word = str(word).strip()
        confidence = float(data["conf"][index])  # type: ignore[arg-type]
        if not word or confidence < 0:
            continue
        key = (
            int(data["block_num"][index]),  # type: ignore[arg-type]
            int(data["par_num"][index]),  # type: ignore[arg-type]
            int(data["line_num"][index]),  # type: ignore[arg-type]
        )
        lines.setdefault(key, []).append(word)
        confidences.append(confidence)

    text = "\n".join(" ".join(words) for words in lines.values())
    return Recognition(text=text, confidence=fmean(confidences) if confidences else 0.0)


class TesseractRecognizer:
    """Scoped access to the Tesseract engine for one language."""

    def __init__(self, language: str = "eng") -> None:
        self.language = language
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def __enter__(self) -> "TesseractRecognizer":
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as exc:
            raise ExternalEngineError("Tesseract OCR engine is not installed") from exc
        LOGGER.debug("Acquired Tesseract %s recognizer for %s", version, self.language)
        self._active = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._active = False
        LOGGER.debug("Released Tesseract recognizer for %s", self.language)

    def recognize(self, image: Image.Image, *, name: str | None = None) -> Recognition:
        if not self._active:
            raise RuntimeError("TesseractRecognizer must be used inside a 'with' block")
        try:
            data = pytesseract.image_to_data(
                image,
                lang=self.language,
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, RuntimeError) as exc:
            LOGGER.error("Tesseract failed on %s: %s", name or "image", exc)
            raise ExternalEngineError("Text recognition failed", filename=name) from exc
        return recognition_from_data(data)


__all__ = ["Recognition", "Recognizer", "TesseractRecognizer", "recognition_from_data"]
