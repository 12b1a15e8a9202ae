"""
Upload relay

Accepts a file upload as multipart/form-data or as JSON with a base64
encoded file, checks that every required field is present, and forwards the
upload as JSON to the configured flow URL.
"""

# Local Modules
from upload_relay.forwarder import WebhookForwarder
from upload_relay.processor import UploadHandler
from upload_relay.data_classes import InboundRequest, UploadRequest

__all__ = [
    "InboundRequest",
    "UploadHandler",
    "UploadRequest",
    "WebhookForwarder",
]
