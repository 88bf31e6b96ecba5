import re
from io import BytesIO
from typing import Optional

import docx
from PyPDF2 import PdfReader

from models.interview import CandidateInfo
from utils.errors import InvalidRequestError

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(r"(\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
NAME_RE = re.compile(r"^([A-Z][a-z]+\s+[A-Z][a-z]+)", re.MULTILINE)


def detect_format(filename: Optional[str], content_type: Optional[str]) -> str:
    """Return "pdf" or "docx"; anything else is rejected."""
    fn = (filename or "").lower()
    if content_type == PDF_MIME or fn.endswith(".pdf"):
        return "pdf"
    if content_type == DOCX_MIME or fn.endswith(".docx"):
        return "docx"
    raise InvalidRequestError("Only PDF and DOCX files are allowed")


def extract_text(file_bytes: bytes, filename: Optional[str], content_type: Optional[str] = None) -> str:
    kind = detect_format(filename, content_type)
    try:
        if kind == "pdf":
            reader = PdfReader(BytesIO(file_bytes))
            text = "\n".join(page.extract_text() or "" for page in reader.pages)
        else:
            document = docx.Document(BytesIO(file_bytes))
            text = "\n".join(paragraph.text for paragraph in document.paragraphs)
    except Exception as exc:
        raise InvalidRequestError(f"Failed to extract text from file: {exc}") from exc

    text = text.replace("\x00", "").strip()
    if not text:
        raise InvalidRequestError(
            "No readable text could be extracted from the file. "
            "If this is a scanned/image PDF, please upload a text-based PDF or a DOCX."
        )
    return text


def _first(pattern: re.Pattern, text: str) -> str:
    match = pattern.search(text)
    return match.group(0).strip() if match else ""


def extract_candidate_info(text: str) -> CandidateInfo:
    """Best-effort guess; blanks are filled in by the candidate afterwards."""
    text = text or ""
    return CandidateInfo(
        name=_first(NAME_RE, text),
        email=_first(EMAIL_RE, text),
        phone=_first(PHONE_RE, text),
    )
