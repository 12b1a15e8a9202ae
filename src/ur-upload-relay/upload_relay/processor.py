# Standard Library
import json
from typing import Callable, Dict, Optional

# Third Party
from aws_lambda_powertools import Logger
from aws_lambda_powertools.event_handler import Response, content_types

# Local Modules
from upload_relay.config import get_flow_url
from upload_relay.forwarder import WebhookForwarder
from upload_relay.exceptions import BadRequestError
from upload_relay.parsers import is_multipart, parse_json, parse_multipart
from upload_relay.data_classes import (
    InboundRequest,
    UploadRequest,
    REQUIRED_FIELDS_MESSAGE,
)

# Initialize logger
logger = Logger(service="upload_relay_processor")

# Headers sent on every response
CORS_ORIGIN_HEADERS = {"Access-Control-Allow-Origin": "*"}

# Headers sent on preflight and successful responses
CORS_HEADERS = {
    **CORS_ORIGIN_HEADERS,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

SUCCESS_BODY = {
    "status": "OK",
    "success": True,
    "message": "Upload processed successfully!",
}


def _response(
    status_code: int,
    headers: Dict[str, str],
    body: str = "",
    content_type: Optional[str] = None,
) -> Response:
    return Response(
        status_code=status_code,
        content_type=content_type,
        body=body,
        headers=dict(headers),
    )


def bad_request(message: str) -> Response:
    """Build a 400 response carrying a plain-text message."""
    return _response(
        400, CORS_ORIGIN_HEADERS, message, content_types.TEXT_PLAIN
    )


class UploadHandler:
    """Validates uploads and relays them to the configured flow."""

    def __init__(
        self,
        forwarder: WebhookForwarder,
        flow_url_provider: Callable[[], Optional[str]] = get_flow_url,
    ) -> None:
        """Initialize the handler.

        Parameters
        ----------
        forwarder : WebhookForwarder
            The shared forwarder used to call the flow.
        flow_url_provider : Callable[[], Optional[str]], optional
            Returns the flow URL for the current request, defaults to
            `get_flow_url`.
        """
        self.forwarder = forwarder
        self.flow_url_provider = flow_url_provider

    def handle(self, request: InboundRequest) -> Response:
        """Handle one request to the upload endpoint.

        OPTIONS requests are answered as CORS preflights and any method
        other than POST is rejected with 405. A POST body is parsed as
        multipart/form-data or JSON depending on its `Content-Type`, and a
        complete upload is forwarded to the flow. The flow's outcome never
        changes the response.

        Parameters
        ----------
        request : InboundRequest
            The inbound HTTP request.

        Returns
        -------
        Response
            The response for the caller.
        """
        logger.info(
            "Upload function triggered", extra={"method": request.method}
        )

        if request.method == "OPTIONS":
            return _response(200, CORS_HEADERS)

        if request.method != "POST":
            return _response(405, CORS_ORIGIN_HEADERS)

        try:
            upload = self.parse(request)
        except BadRequestError as e:
            logger.warning(f"Rejected upload request: {e.message}")
            return bad_request(e.message)

        missing = upload.missing_fields()
        if missing:
            logger.warning(
                "Upload is missing required fields.",
                extra={"missing_fields": missing},
            )
            return bad_request(REQUIRED_FIELDS_MESSAGE)

        logger.info("Parsed upload", extra=upload.log_summary())

        self.forward(upload)

        return _response(
            200,
            CORS_HEADERS,
            json.dumps(SUCCESS_BODY),
            content_types.APPLICATION_JSON,
        )

    @staticmethod
    def parse(request: InboundRequest) -> UploadRequest:
        """Parse the request body in the mode its `Content-Type` selects."""
        if is_multipart(request.content_type):
            return parse_multipart(request.body, request.content_type)
        return parse_json(request.body)

    def forward(self, upload: UploadRequest) -> bool:
        """Forward a complete upload to the flow, if one is configured.

        Returns
        -------
        bool
            True if the flow accepted the payload, False if forwarding was
            skipped or failed.
        """
        flow_url = self.flow_url_provider()
        if not flow_url:
            logger.info("No flow URL configured; skipping forwarding.")
            return False

        return self.forwarder.forward(flow_url, upload.to_payload())
