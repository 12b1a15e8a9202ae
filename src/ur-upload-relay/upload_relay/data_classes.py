# Standard Library
import base64
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field, fields

# Third Party
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEventV2

# Message returned when any of the upload fields is missing
REQUIRED_FIELDS_MESSAGE = (
    "Missing one or more required fields: fileName, contentType, file, "
    "email, token, messageId, uniqueFileName."
)

# Number of token characters kept in log lines
TOKEN_LOG_PREFIX_LENGTH = 10


@dataclass
class InboundRequest:
    """Transport-neutral view of an HTTP request to the upload endpoint.

    Attributes
    ----------
        method : str
            The HTTP method, upper-cased.
        headers : Dict[str, str]
            Request headers keyed by lower-cased header name.
        body : bytes
            The raw request body, already base64-decoded when the gateway
            delivered it encoded.
    """

    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self) -> None:
        self.method = (self.method or "").upper()
        self.headers = {
            str(name).lower(): value
            for name, value in (self.headers or {}).items()
        }

    @property
    def content_type(self) -> Optional[str]:
        """The `Content-Type` header, if present."""
        return self.headers.get("content-type")

    @classmethod
    def from_event(cls, event: APIGatewayProxyEventV2) -> "InboundRequest":
        """Build a request from an API Gateway HTTP API (v2) event.

        Parameters
        ----------
        event : APIGatewayProxyEventV2
            The Powertools view of the Lambda event.

        Returns
        -------
        InboundRequest
            The method, headers and decoded body of the event.
        """
        raw_body = event.body or ""
        if event.is_base64_encoded:
            body = base64.b64decode(raw_body)
        else:
            body = raw_body.encode("utf-8")

        return cls(
            method=event.request_context.http.method,
            headers=dict(event.headers or {}),
            body=body,
        )


@dataclass
class UploadRequest:
    """Fields extracted from an upload request.

    Every field is optional while parsing; a request may only be forwarded
    once `is_complete()` holds.

    Attributes
    ----------
        file_name : Optional[str]
            The original file name supplied by the caller.
        content_type : Optional[str]
            The MIME type of the file.
        file_bytes : Optional[bytes]
            The file content.
        email : Optional[str]
            The caller's e-mail address, passed through unchecked.
        token : Optional[str]
            The caller-supplied token, passed through unchecked.
        message_id : Optional[str]
            The message identifier the upload belongs to.
        unique_file_name : Optional[str]
            The caller-assigned unique name of the file.
    """

    file_name: Optional[str] = field(
        default=None, metadata={"wire_name": "fileName"}
    )
    content_type: Optional[str] = field(
        default=None, metadata={"wire_name": "contentType"}
    )
    file_bytes: Optional[bytes] = field(
        default=None, metadata={"wire_name": "fileBase64"}
    )
    email: Optional[str] = field(
        default=None, metadata={"wire_name": "email"}
    )
    token: Optional[str] = field(
        default=None, metadata={"wire_name": "token"}
    )
    message_id: Optional[str] = field(
        default=None, metadata={"wire_name": "messageId"}
    )
    unique_file_name: Optional[str] = field(
        default=None, metadata={"wire_name": "uniqueFileName"}
    )

    def missing_fields(self) -> List[str]:
        """Return the wire names of the fields that are still unset."""
        return [
            field_info.metadata["wire_name"]
            for field_info in fields(self)
            if getattr(self, field_info.name) is None
        ]

    def is_complete(self) -> bool:
        """Whether all seven fields are set."""
        return not self.missing_fields()

    def to_payload(self) -> Dict[str, Any]:
        """Build the JSON object forwarded to the flow.

        Returns
        -------
        Dict[str, Any]
            The upload fields keyed by their wire names, with the file
            content encoded as standard base64 under `fileBase64`.
        """
        return {
            "fileName": self.file_name,
            "contentType": self.content_type,
            "fileBase64": base64.b64encode(self.file_bytes or b"").decode(
                "ascii"
            ),
            "email": self.email,
            "token": self.token,
            "messageId": self.message_id,
            "uniqueFileName": self.unique_file_name,
        }

    def log_summary(self) -> Dict[str, Any]:
        """Structured log keys describing the upload without its content."""
        token = self.token or ""
        if len(token) > TOKEN_LOG_PREFIX_LENGTH:
            token = token[:TOKEN_LOG_PREFIX_LENGTH] + "..."

        return {
            "file_name": self.file_name,
            "content_type": self.content_type,
            "email": self.email,
            "token": token,
            "message_id": self.message_id,
            "unique_file_name": self.unique_file_name,
            "file_size": len(self.file_bytes or b""),
        }
