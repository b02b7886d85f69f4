"""Path display, size formatting and text decoding helpers."""

from __future__ import annotations

from pathlib import Path

from vetta.errors import InputValidationError

# Decoding attempts, in order.
TEXT_ENCODINGS: tuple[str, ...] = ("utf-8-sig", "cp1252")


def normalize_newlines(text: str) -> str:
    """Return *text* with CRLF, doubled-CR and bare CR line endings as LF."""

    if "\r" not in text:
        return text
    return text.replace("\r\r\n", "\n").replace("\r\n", "\n").replace("\r", "\n")


def format_display_path(path: Path) -> str:
    """Show only the file name, quoted when it contains spaces."""

    name = path.name
    return f'"{name}"' if " " in name else name


def format_bytes(size: int) -> str:
    """Render a human-readable representation of a byte size."""

    if size < 1024:
        return f"{size} B"
    if size < 1024**2:
        return f"{size / 1024:.1f} KiB"
    if size < 1024**3:
        return f"{size / (1024 ** 2):.1f} MiB"
    return f"{size / (1024 ** 3):.2f} GiB"


def read_text_file(path: Path, description: str) -> tuple[str, str]:
    """Decode a user-supplied text file and return ``(text, encoding)``."""

    display = format_display_path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise InputValidationError(
            message=f"Unable to read the {description} file {display}.",
            remediation="Check that the file exists and is readable, then retry.",
        ) from exc

    for encoding in TEXT_ENCODINGS:
        try:
            return normalize_newlines(data.decode(encoding)), encoding
        except UnicodeDecodeError:
            continue

    raise InputValidationError(
        message=f"The {description} file {display} is neither UTF-8 nor Windows-1252 text.",
        remediation="Save the file as UTF-8 or pass the job description with --jd-text.",
    )


__all__ = [
    "TEXT_ENCODINGS",
    "format_bytes",
    "format_display_path",
    "normalize_newlines",
    "read_text_file",
]
