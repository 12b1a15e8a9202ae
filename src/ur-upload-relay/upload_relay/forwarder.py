# Standard Library
from typing import Any, Dict, Optional

# Third Party
import requests
from aws_lambda_powertools import Logger

# Initialize logger
logger = Logger(service="upload_relay_forwarder")


class WebhookForwarder:
    """Posts upload payloads to the configured flow.

    One instance is created per execution environment and shared by every
    invocation; each call issues an independent request on the session.
    """

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        """Initialize the forwarder.

        Parameters
        ----------
        session : Optional[requests.Session]
            The HTTP session to send requests with. A new session is
            created when not provided.
        """
        self.session = session if session is not None else requests.Session()

    def forward(self, url: str, payload: Dict[str, Any]) -> bool:
        """Send a single JSON POST to the flow.

        Failures are logged and swallowed; the call is never retried.

        Parameters
        ----------
        url : str
            The flow URL.
        payload : Dict[str, Any]
            The JSON-serializable upload payload.

        Returns
        -------
        bool
            True if the flow answered with a success status, False otherwise.
        """
        try:
            response = self.session.post(url, json=payload)
            logger.info(
                "Flow called", extra={"status_code": response.status_code}
            )
            logger.info("Flow response", extra={"body": response.text})
            response.raise_for_status()
            return True
        except requests.RequestException as e:
            logger.warning(f"Error calling Flow: {e}")
            return False
