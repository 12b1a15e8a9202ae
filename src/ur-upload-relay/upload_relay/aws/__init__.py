"""AWS module for the upload relay.

Wraps the AWS services the relay reads its configuration from.
"""

# Local Modules
from upload_relay.aws.ssm import SsmClient

__all__ = ["SsmClient"]
