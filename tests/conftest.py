# Standard Library
import os
import sys
import importlib.util
from pathlib import Path
from types import ModuleType
from typing import Dict, List, Optional, Tuple

# Third Party
import pytest
import boto3
from moto import mock_aws

# Source directory of the upload relay Lambda function
UPLOAD_RELAY_DIR = "ur-upload-relay"

MULTIPART_BOUNDARY = "----relay-test-boundary"


@pytest.fixture(scope="session")
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture(scope="function")
def mocked_ssm(aws_credentials):
    """
    Mocked SSM service using moto for testing.
    This fixture sets up a mocked SSM Parameter Store that can be used in
    tests.
    """
    with mock_aws():
        ssm_client = boto3.client("ssm", region_name="us-east-1")
        yield ssm_client


@pytest.fixture(scope="function")
def create_flow_url_parameter(mocked_ssm):
    """
    Store a flow URL in the mocked SSM Parameter Store.
    """
    mocked_ssm.put_parameter(
        Name="/upload-relay/flow-url",
        Value="https://flow.example.com/from-ssm",
        Type="SecureString",
    )
    return "/upload-relay/flow-url"


def build_multipart_body(
    fields: List[Tuple[str, str]],
    files: Optional[List[Tuple[str, str, bytes, Optional[str]]]] = None,
    boundary: str = MULTIPART_BOUNDARY,
) -> bytes:
    """
    Build a multipart/form-data body.

    Parameters
    ----------
    fields : List[Tuple[str, str]]
        `(name, value)` pairs sent as plain form fields.
    files : Optional[List[Tuple[str, str, bytes, Optional[str]]]]
        `(name, filename, content, content_type)` tuples sent as file
        parts; a content type of None omits the part's Content-Type header.
    boundary : str
        The multipart boundary.

    Returns
    -------
    bytes
        The encoded body.
    """
    chunks = []
    for name, filename, content, content_type in files or []:
        headers = (
            f'Content-Disposition: form-data; name="{name}"; '
            f'filename="{filename}"\r\n'
        )
        if content_type:
            headers += f"Content-Type: {content_type}\r\n"
        chunks.append(
            f"--{boundary}\r\n{headers}\r\n".encode("utf-8")
            + content
            + b"\r\n"
        )
    for name, value in fields:
        chunks.append(
            (
                f"--{boundary}\r\n"
                f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
                f"{value}\r\n"
            ).encode("utf-8")
        )
    chunks.append(f"--{boundary}--\r\n".encode("utf-8"))
    return b"".join(chunks)


def multipart_content_type(boundary: str = MULTIPART_BOUNDARY) -> str:
    """Return the Content-Type header for a multipart body."""
    return f"multipart/form-data; boundary={boundary}"


def http_api_event(
    method: str,
    body: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    is_base64_encoded: bool = False,
    path: str = "/upload",
) -> Dict:
    """Build an API Gateway HTTP API (payload format 2.0) event."""
    return {
        "version": "2.0",
        "routeKey": "$default",
        "rawPath": path,
        "rawQueryString": "",
        "headers": headers or {},
        "requestContext": {
            "accountId": "123456789012",
            "apiId": "abcdef123",
            "domainName": "api.example.com",
            "http": {
                "method": method,
                "path": path,
                "protocol": "HTTP/1.1",
                "sourceIp": "192.168.1.1",
                "userAgent": "test-client/1.0",
            },
            "requestId": "test-request-id",
            "routeKey": "$default",
            "stage": "$default",
            "time": "01/Jan/2024:12:00:00 +0000",
            "timeEpoch": 1704110400000,
        },
        "body": body,
        "isBase64Encoded": is_base64_encoded,
    }


def pytest_configure(config):
    """
    Configure pytest to add the Lambda source directory to sys.path for
    module imports.
    """
    # Get the absolute path to the project root
    project_root = Path(__file__).parent.parent

    # Add the Lambda source directory to sys.path
    src_path = project_root / "src" / UPLOAD_RELAY_DIR
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))

    return config


def import_handler(module_name: str) -> ModuleType:
    """
    Import a handler.py module from a src subdirectory, even when the directory
    name contains hyphens that prevent normal Python imports.

    Parameters
    ----------
    module_name : str
        The name of the module directory under src/
        (e.g., "ur-upload-relay")

    Returns
    -------
    ModuleType
        The imported handler module

    Raises
    ------
    ImportError
        If the module cannot be found or imported
    """
    # Get the absolute path to the project root
    project_root = Path(__file__).parent.parent

    # Construct the path to the handler.py file
    handler_path = project_root / "src" / module_name / "handler.py"

    if not handler_path.exists():
        raise ImportError(f"Handler file {handler_path} does not exist")

    # Create a unique module name to avoid conflicts
    safe_module_name = f"test_import_{module_name.replace('-', '_')}_handler"

    # Load the module specification
    spec = importlib.util.spec_from_file_location(
        safe_module_name, handler_path
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"Could not load spec for {handler_path}")

    # Create the module
    handler_module = importlib.util.module_from_spec(spec)

    # Save the original sys.path
    original_path = sys.path.copy()

    # Add the module directory to sys.path temporarily so internal imports work
    module_dir = str(handler_path.parent)
    sys.path.insert(0, module_dir)

    # Register the module in sys.modules (needed for relative imports)
    sys.modules[safe_module_name] = handler_module

    try:
        # Execute the module code
        spec.loader.exec_module(handler_module)
        return handler_module
    except Exception:
        # Clean up in case of error
        if safe_module_name in sys.modules:
            del sys.modules[safe_module_name]
        raise
    finally:
        # Restore original sys.path
        sys.path = original_path
