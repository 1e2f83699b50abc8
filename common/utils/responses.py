"""
Standard API response helpers.

Every response body uses the same envelope:

    success: {"statusCode": 200, "data": ..., "message": "...", "success": true}
    error:   {"statusCode": 401, "data": null, "message": "...",
              "success": false, "errors": []}

Example:
    from common.utils import success_response

    @app.get("/users/{id}")
    async def get_user(id: str):
        user = await users.find_one({"_id": ObjectId(id)})
        return success_response(user, message="User fetched successfully")
"""

from typing import Any, Optional, Dict, List


def success_response(
    data: Any = None,
    message: str = "Success",
    status_code: int = 200,
) -> Dict[str, Any]:
    """
    Create a standard success response.

    Args:
        data: The response data (can be dict, list, or any serializable type)
        message: Human-readable success message
        status_code: HTTP status code echoed in the body

    Returns:
        Envelope dictionary; success is derived from the status code
    """
    return {
        "statusCode": status_code,
        "data": data,
        "message": message,
        "success": status_code < 400,
    }


def error_response(
    status_code: int,
    message: str,
    errors: Optional[List[Any]] = None,
) -> Dict[str, Any]:
    """
    Create a standard error response.

    Args:
        status_code: HTTP status code echoed in the body
        message: Human-readable error message
        errors: List of specific errors (for validation errors)

    Returns:
        Envelope dictionary with data=None and success=False
    """
    return {
        "statusCode": status_code,
        "data": None,
        "message": message,
        "success": False,
        "errors": list(errors or []),
    }
