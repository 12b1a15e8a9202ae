"""
Request body parsers for the upload endpoint.

Both parsers return an `UploadRequest` whose fields are left unset when the
body does not carry them; completeness is checked by the caller. Errors that
make the body unreadable raise `BadRequestError`.
"""

# Standard Library
import json
import base64
import binascii
from typing import Dict, List, NamedTuple, Optional

# Third Party
from aws_lambda_powertools import Logger
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import (
    MultipartParser,
    MultipartState,
    parse_options_header,
)

# Local Modules
from upload_relay.data_classes import UploadRequest
from upload_relay.exceptions import BadRequestError
from upload_relay.content_types import content_type_from_file_name

# Initialize logger
logger = Logger(service="upload_relay_parsers")

MULTIPART_FORM_DATA = "multipart/form-data"

# Multipart form field names (lower-cased) and the attribute they fill
FORM_FIELDS = {
    "email": "email",
    "token": "token",
    "messageid": "message_id",
    "uniquefilename": "unique_file_name",
}

# JSON properties read as plain strings
JSON_STRING_FIELDS = {
    "fileName": "file_name",
    "contentType": "content_type",
    "email": "email",
    "token": "token",
    "messageId": "message_id",
    "uniqueFileName": "unique_file_name",
}


class MultipartPart(NamedTuple):
    """A single part of a multipart body."""

    headers: Dict[str, str]
    body: bytes


class _PartCollector:
    """Callbacks for `MultipartParser` that gather parts in stream order."""

    def __init__(self) -> None:
        self.parts: List[MultipartPart] = []
        self._headers: Dict[str, str] = {}
        self._header_field = bytearray()
        self._header_value = bytearray()
        self._body = bytearray()

    def callbacks(self) -> dict:
        return {
            "on_part_begin": self.on_part_begin,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
        }

    def on_part_begin(self) -> None:
        self._headers = {}
        self._body = bytearray()

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        name = self._header_field.decode("latin-1").strip().lower()
        self._headers[name] = self._header_value.decode("latin-1").strip()
        self._header_field = bytearray()
        self._header_value = bytearray()

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._body += data[start:end]

    def on_part_end(self) -> None:
        self.parts.append(MultipartPart(self._headers, bytes(self._body)))


def is_multipart(content_type: Optional[str]) -> bool:
    """Whether a `Content-Type` header selects multipart parsing."""
    return bool(content_type) and content_type.lower().startswith(
        MULTIPART_FORM_DATA
    )


def _trim_quotes(value: bytes) -> str:
    return value.decode("utf-8", errors="replace").strip().strip('"')


def get_boundary(content_type: str) -> Optional[str]:
    """Extract the multipart boundary from a `Content-Type` header.

    Parameters
    ----------
    content_type : str
        The full header value, e.g. `multipart/form-data; boundary=xyz`.

    Returns
    -------
    Optional[str]
        The unquoted boundary, or None if it is absent or blank.
    """
    _, params = parse_options_header(content_type)
    params = {key.lower(): value for key, value in params.items()}
    boundary = _trim_quotes(params.get(b"boundary", b""))
    return boundary or None


def read_multipart_parts(body: bytes, boundary: str) -> List[MultipartPart]:
    """Split a multipart body into its parts.

    Parameters
    ----------
    body : bytes
        The raw request body.
    boundary : str
        The boundary from the request's `Content-Type` header.

    Returns
    -------
    List[MultipartPart]
        The complete parts, in the order they appear in the body.

    Raises
    ------
    BadRequestError
        If the body is not valid multipart data for the boundary.
    """
    collector = _PartCollector()
    parser = MultipartParser(boundary, collector.callbacks())
    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as e:
        raise BadRequestError(f"Invalid multipart body: {e}") from e

    # Anything other than START (empty body) or END leaves a part unfinished
    if parser.state not in (MultipartState.START, MultipartState.END):
        raise BadRequestError(
            "Invalid multipart body: body ended before the closing boundary."
        )
    return collector.parts


def parse_multipart(body: bytes, content_type: str) -> UploadRequest:
    """Extract upload fields from a multipart/form-data body.

    Parts without a usable `Content-Disposition` header and form fields
    with unknown names are skipped. When a field or file appears more than
    once, the last occurrence wins.

    Parameters
    ----------
    body : bytes
        The raw request body.
    content_type : str
        The request's `Content-Type` header.

    Returns
    -------
    UploadRequest
        The fields found in the body.

    Raises
    ------
    BadRequestError
        If the boundary is missing or the body is malformed.
    """
    boundary = get_boundary(content_type)
    if not boundary:
        raise BadRequestError("Missing multipart boundary.")

    upload = UploadRequest()
    for part in read_multipart_parts(body, boundary):
        disposition_header = part.headers.get("content-disposition")
        if not disposition_header:
            logger.debug("Skipping part without Content-Disposition header.")
            continue

        disposition, params = parse_options_header(disposition_header)
        params = {key.lower(): value for key, value in params.items()}
        if disposition.lower() != b"form-data":
            logger.debug(
                "Skipping part with unsupported disposition.",
                extra={"disposition": disposition.decode("latin-1")},
            )
            continue

        file_name = _trim_quotes(params.get(b"filename", b""))
        field_name = _trim_quotes(params.get(b"name", b""))

        if file_name:
            upload.file_name = file_name
            part_content_type = part.headers.get("content-type", "").strip()
            upload.content_type = (
                part_content_type or content_type_from_file_name(file_name)
            )
            upload.file_bytes = part.body
        elif field_name:
            attribute = FORM_FIELDS.get(field_name.lower())
            if attribute is None:
                logger.debug(
                    "Ignoring unknown form field.",
                    extra={"field": field_name},
                )
                continue
            setattr(
                upload,
                attribute,
                part.body.decode("utf-8", errors="replace"),
            )

    return upload


def parse_json(body: bytes) -> UploadRequest:
    """Extract upload fields from a JSON body.

    Parameters
    ----------
    body : bytes
        The raw request body.

    Returns
    -------
    UploadRequest
        The fields found in the JSON object; the file content is decoded
        from the base64 `fileBase64` property.

    Raises
    ------
    BadRequestError
        If the body is empty, is not a JSON object, or holds a property of
        the wrong type.
    """
    text = body.decode("utf-8-sig", errors="replace")
    if not text.strip():
        raise BadRequestError("Empty request body.")

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise BadRequestError(f"Invalid JSON: {e}") from e

    if not isinstance(document, dict):
        raise BadRequestError(
            "Invalid JSON: request body must be a JSON object."
        )

    upload = UploadRequest()
    for property_name, attribute in JSON_STRING_FIELDS.items():
        setattr(upload, attribute, _get_string(document, property_name))

    file_base64 = _get_string(document, "fileBase64")
    if file_base64 is not None:
        try:
            upload.file_bytes = base64.b64decode(
                "".join(file_base64.split()), validate=True
            )
        except (binascii.Error, ValueError) as e:
            raise BadRequestError(
                "Invalid JSON: 'fileBase64' is not valid base64."
            ) from e

    return upload


def _get_string(document: dict, property_name: str) -> Optional[str]:
    value = document.get(property_name)
    if value is not None and not isinstance(value, str):
        raise BadRequestError(
            f"Invalid JSON: '{property_name}' must be a string."
        )
    return value
