"""
SSM client wrapper for fetching parameters from AWS Systems Manager
Parameter Store.
"""

# Standard Library
from typing import Optional

# Third Party
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from aws_lambda_powertools import Logger

# Initialize logger
logger = Logger(service="ssm-client-wrapper")


class SsmClient:
    """A client for interacting with AWS Systems Manager Parameter Store."""

    def __init__(self, region_name: Optional[str] = None) -> None:
        """Initialize the SSM client.

        Parameters
        ----------
        region_name : Optional[str]
            The AWS region name where the SSM Parameter Store is located.
            If not provided, the default region from the AWS configuration
            will be used.
        """
        try:
            self.client = boto3.client("ssm", region_name=region_name)
        except Exception as e:
            logger.error("Failed to create SSM client: %s", e)
            raise

    def get_parameter(
        self, name: str, with_decryption: bool = False
    ) -> Optional[str]:
        """Fetch a parameter from SSM Parameter Store.

        Parameters
        ----------
        name : str
            The name of the parameter to fetch.
        with_decryption : bool, optional
            Whether to decrypt the parameter value if it is encrypted,
            defaults to False.

        Returns
        -------
        Optional[str]
            The parameter value or None if it could not be read.
        """
        try:
            response = self.client.get_parameter(
                Name=name, WithDecryption=with_decryption
            )
            return response.get("Parameter", {}).get("Value")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to get parameter {name}: {e}")
            return None
