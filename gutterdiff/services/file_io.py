"""
File I/O service for reading baseline and document text.

Handles:
- Encoding detection
- BOM handling
- Binary file rejection
- Line ending detection
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional

import chardet


logger = logging.getLogger(__name__)


class LineEnding(Enum):
    """Line ending style."""
    LF = auto()      # Unix: \n
    CRLF = auto()    # Windows: \r\n
    CR = auto()      # Old Mac: \r
    MIXED = auto()   # Mixed endings
    NONE = auto()    # No line endings (single line or binary)


@dataclass
class FileContent:
    """Container for decoded file content with metadata."""
    content: str
    encoding: str
    line_ending: LineEnding
    bom: bool
    size: int


@dataclass
class ReadResult:
    """Result of a file read operation."""
    success: bool
    content: Optional[FileContent] = None
    error: Optional[str] = None
    is_binary: bool = False

    @property
    def text(self) -> Optional[str]:
        return self.content.content if self.content else None


class FileIOService:
    """Service for reading text files safely."""

    # Binary file signatures (magic bytes)
    BINARY_SIGNATURES = [
        b'\x89PNG',        # PNG
        b'\xff\xd8\xff',   # JPEG
        b'GIF8',           # GIF
        b'PK\x03\x04',     # ZIP
        b'\x1f\x8b',       # GZIP
        b'%PDF',           # PDF
        b'\x7fELF',        # ELF
    ]

    BOMS = [
        (b'\xef\xbb\xbf', 'utf-8-sig'),
        (b'\xff\xfe', 'utf-16-le'),
        (b'\xfe\xff', 'utf-16-be'),
    ]

    def __init__(
        self,
        default_encoding: str = 'utf-8',
        fallback_encoding: str = 'latin-1',
        binary_check_size: int = 8192,
        max_text_size: int = 50 * 1024 * 1024
    ):
        self.default_encoding = default_encoding
        self.fallback_encoding = fallback_encoding
        self.binary_check_size = binary_check_size
        self.max_text_size = max_text_size

    def read_file(self, path: Path | str, encoding: Optional[str] = None) -> ReadResult:
        """
        Read a text file with automatic encoding detection.

        Args:
            path: Path to the file
            encoding: Force specific encoding (auto-detect if None)

        Returns:
            ReadResult with content or error information
        """
        path = Path(path)

        if not path.exists():
            return ReadResult(success=False, error=f"File not found: {path}")

        if not path.is_file():
            return ReadResult(success=False, error=f"Not a file: {path}")

        try:
            raw_content = path.read_bytes()
        except PermissionError:
            return ReadResult(success=False, error=f"Permission denied: {path}")
        except OSError as e:
            return ReadResult(success=False, error=f"OS error: {e}")

        size = len(raw_content)
        if size > self.max_text_size:
            return ReadResult(
                success=False,
                error=f"File too large ({size / 1024 / 1024:.2f} MB). "
                      f"Max size is {self.max_text_size / 1024 / 1024:.2f} MB."
            )

        bom = False
        detected_encoding = encoding
        for marker, bom_encoding in self.BOMS:
            if raw_content.startswith(marker):
                bom = True
                detected_encoding = bom_encoding
                break

        if not bom and self._is_binary(raw_content[:self.binary_check_size]):
            return ReadResult(success=False, is_binary=True,
                              error="File appears to be binary")

        detected_encoding = detected_encoding or self._detect_encoding(raw_content)

        try:
            content = raw_content.decode(detected_encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug(f"Decoding {path} as {detected_encoding} failed, using {self.fallback_encoding}")
            content = raw_content.decode(self.fallback_encoding, errors='replace')
            detected_encoding = self.fallback_encoding

        return ReadResult(
            success=True,
            content=FileContent(
                content=content,
                encoding=detected_encoding,
                line_ending=self._detect_line_ending(content),
                bom=bom,
                size=size
            )
        )

    def _is_binary(self, chunk: bytes) -> bool:
        """Check if a leading chunk of content looks binary."""
        for sig in self.BINARY_SIGNATURES:
            if chunk.startswith(sig):
                return True

        if b'\x00' in chunk:
            return True

        # Check ratio of non-text bytes
        non_text = sum(1 for b in chunk if b < 9 or (13 < b < 32))
        return len(chunk) > 0 and non_text / len(chunk) > 0.3

    def _detect_encoding(self, content: bytes) -> str:
        """Detect encoding of content."""
        if not content:
            return self.default_encoding

        result = chardet.detect(content)

        if result['confidence'] > 0.7 and result['encoding']:
            encoding = result['encoding'].lower()
            if encoding == 'ascii':
                return 'utf-8'  # ASCII is subset of UTF-8
            return encoding

        return self.default_encoding

    def _detect_line_ending(self, content: str) -> LineEnding:
        """Detect line ending style in content."""
        crlf_count = content.count('\r\n')
        lf_count = content.count('\n') - crlf_count
        cr_count = content.count('\r') - crlf_count

        if crlf_count == 0 and lf_count == 0 and cr_count == 0:
            return LineEnding.NONE

        total = crlf_count + lf_count + cr_count

        if crlf_count == total:
            return LineEnding.CRLF
        elif lf_count == total:
            return LineEnding.LF
        elif cr_count == total:
            return LineEnding.CR
        else:
            return LineEnding.MIXED
