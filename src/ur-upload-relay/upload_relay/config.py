"""Configuration for the upload relay.

The flow URL is read on every request so that a changed environment or
parameter takes effect without a cold start. It comes from the `FLOW_URL`
environment variable, or from the SSM parameter named by
`FLOW_URL_PARAMETER_NAME` when the variable is unset.
"""

# Standard Library
import os
from typing import Optional

# Third Party
from aws_lambda_powertools import Logger

# Local Modules
from upload_relay.aws import SsmClient

# Initialize logger
logger = Logger(service="upload_relay_config")

# Environment variables for configuration
API_PREFIX = os.environ.get("API_PREFIX", "")
UPLOAD_ROUTE = f"{API_PREFIX}/upload"

# SSM client, created on first use
ssm_client: Optional[SsmClient] = None


def get_ssm_client() -> SsmClient:
    """Get or create the shared SSM client.

    Returns
    -------
    SsmClient
        The SSM client wrapper.
    """
    global ssm_client

    if ssm_client is None:
        ssm_client = SsmClient()
    return ssm_client


def get_flow_url() -> Optional[str]:
    """Resolve the webhook URL uploads are forwarded to.

    Returns
    -------
    Optional[str]
        The flow URL, or None when forwarding is not configured or the
        parameter cannot be read.
    """
    flow_url = os.environ.get("FLOW_URL")
    if flow_url:
        return flow_url

    parameter_name = os.environ.get("FLOW_URL_PARAMETER_NAME")
    if not parameter_name:
        return None

    logger.debug(f"Reading flow URL from SSM parameter {parameter_name}")
    try:
        client = get_ssm_client()
    except Exception as e:
        logger.error(f"SSM client unavailable, flow URL not resolved: {e}")
        return None

    flow_url = client.get_parameter(parameter_name, with_decryption=True)
    return flow_url or None
