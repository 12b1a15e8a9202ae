# Standard Library
import os

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Known file extensions and the MIME type forwarded for them
EXTENSION_CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": (
        "application/vnd.openxmlformats-officedocument"
        ".wordprocessingml.document"
    ),
    ".xls": "application/vnd.ms-excel",
    ".xlsx": (
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    ),
    ".txt": "text/plain",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".zip": "application/zip",
    ".csv": "text/csv",
}


def content_type_from_file_name(file_name: str) -> str:
    """Determine a content type from a file name's extension.

    Parameters
    ----------
    file_name : str
        The file name, optionally including a path.

    Returns
    -------
    str
        The MIME type registered for the lower-cased extension, or
        `application/octet-stream` when the extension is unknown or absent.
    """
    # A leading dot counts as an extension, so ".pdf" is a PDF
    base_name = os.path.basename(file_name or "")
    _, dot, extension = base_name.rpartition(".")
    extension = (dot + extension).lower() if dot and extension else ""
    return EXTENSION_CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)
