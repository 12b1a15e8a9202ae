# Standard Library
import json
from typing import Any, Dict

# Third Party
from aws_lambda_powertools import Logger
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.event_handler import APIGatewayHttpResolver, Response
from aws_lambda_powertools.utilities.typing import LambdaContext

# Local Modules
from upload_relay import InboundRequest, UploadHandler, WebhookForwarder
from upload_relay.config import UPLOAD_ROUTE

# Initialize Powertools
logger = Logger()
app = APIGatewayHttpResolver()

# Shared across warm invocations
forwarder = WebhookForwarder()
upload_handler = UploadHandler(forwarder)

# Every method is routed to the handler so it can answer 405 itself
ROUTED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


@app.route(UPLOAD_ROUTE, method=ROUTED_METHODS)
def upload() -> Response:
    """
    Endpoint receiving file uploads.

    Accepts either `multipart/form-data` with a file part and the form
    fields `email`, `token`, `messageid` and `uniqueFileName`, or a JSON
    object:

    - `{"fileName": "report.pdf", "contentType": "application/pdf",
      "fileBase64": "...", "email": "...", "token": "...",
      "messageId": "...", "uniqueFileName": "..."}`

    Returns
    -------
    Response
        200 with a fixed success body once the upload is valid, 400 for an
        invalid upload, 405 for an unsupported method.
    """
    request = InboundRequest.from_event(app.current_event)
    return upload_handler.handle(request)


@logger.inject_lambda_context(
    log_event=False, correlation_id_path=correlation_paths.API_GATEWAY_HTTP
)
def lambda_handler(
    event: Dict[str, Any], context: LambdaContext
) -> Dict[str, Any]:
    """
    Lambda function handler for the upload endpoint.

    Events are not logged since their bodies carry file contents and
    caller tokens.

    Parameters
    ----------
    event : Dict[str, Any]
        The API Gateway HTTP API (payload format 2.0) event.
    context : LambdaContext
        The context object providing runtime information about the Lambda
        function.

    Returns
    -------
    Dict[str, Any]
        The HTTP response for API Gateway.
    """
    try:
        return app.resolve(event, context)
    except Exception as e:
        logger.exception(f"Unhandled exception in lambda_handler: {e}")
        return {
            "statusCode": 500,
            "headers": {
                "Content-Type": "application/json",
                "Access-Control-Allow-Origin": "*",
            },
            "body": json.dumps(
                {"error": "An internal server error occurred."}
            ),
        }
