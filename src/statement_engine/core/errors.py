"""Error codes and user-friendly messages.

Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable

There is deliberately no code for "no transactions found": that outcome is an
empty result, not an error.
"""

ERROR_CATALOG: dict[str, dict] = {
    "PARSE_002": {
        "code": "PARSE_002",
        "message": "PDF extraction failed: corrupted or invalid file",
        "user_message": "This PDF appears to be corrupted or damaged.",
        "suggestion": "Try downloading the statement again from your bank's website.",
        "retry_allowed": True,
    },
    "PARSE_003": {
        "code": "PARSE_003",
        "message": "PDF is password-protected",
        "user_message": "This statement requires a password.",
        "suggestion": "Please provide the PDF password and try again.",
        "retry_allowed": True,
    },
    "PARSE_004": {
        "code": "PARSE_004",
        "message": "Incorrect password provided for encrypted PDF",
        "user_message": "The password you provided is incorrect.",
        "suggestion": "Check your password and try again.",
        "retry_allowed": True,
    },
    "API_001": {
        "code": "API_001",
        "message": "No PDF file uploaded",
        "user_message": "No PDF file was uploaded.",
        "suggestion": "Please choose a PDF statement to upload.",
        "retry_allowed": False,
    },
    "API_002": {
        "code": "API_002",
        "message": "File size exceeds maximum limit",
        "user_message": "The file is too large.",
        "suggestion": "Please upload a smaller statement file.",
        "retry_allowed": False,
    },
    "API_005": {
        "code": "API_005",
        "message": "Invalid PDF magic bytes",
        "user_message": "This file appears to be corrupt or is not a valid PDF.",
        "suggestion": "Please ensure you're uploading an actual PDF file, not a renamed file.",
        "retry_allowed": False,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Unknown codes resolve to a generic, retryable definition.
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    return get_error(error_code)["user_message"]


def get_suggestion(error_code: str) -> str:
    return get_error(error_code)["suggestion"]


def is_retryable(error_code: str) -> bool:
    return get_error(error_code)["retry_allowed"]
