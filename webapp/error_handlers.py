"""
Error Handlers

This module provides centralized error handling for the Flask application.
API requests get the JSON ``ErrorResponse`` envelope; page requests get the
error template.
"""

from flask import jsonify, render_template, request

from src.exceptions import ApplicationError, ErrorCode, ErrorSeverity
from src.models.api_responses import ErrorResponse
from utils.logger import logger

STATUS_BY_ERROR_CODE = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INVALID_STATE: 409,
    ErrorCode.CONTENT_PARSE_ERROR: 422,
    ErrorCode.EXPORT_ERROR: 500,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.EXTRACTION_ERROR: 502,
    ErrorCode.SERVICE_UNAVAILABLE: 503,
    ErrorCode.TIMEOUT_ERROR: 504,
}


def _wants_json() -> bool:
    return request.is_json or request.path.startswith("/api/")


def _error_page(status: int, message: str, description: str):
    context = {
        "error_code": status,
        "error_message": message,
        "error_description": description,
    }
    return render_template("error.html", **context), status


def handle_application_error(error: ApplicationError):
    """Handle errors raised by the paper builder services."""
    status = STATUS_BY_ERROR_CODE.get(error.error_code, 500)

    if error.severity is ErrorSeverity.HIGH or status >= 500:
        logger.error(f"{status} {error} - URL: {request.url}")
    else:
        logger.warning(f"{status} {error} - URL: {request.url}")

    if _wants_json():
        details = dict(error.details)
        details["error_id"] = error.error_id
        details["recoverable"] = error.recoverable
        response = ErrorResponse(
            message=error.user_message,
            error_code=error.error_code,
            field=error.field,
            details=details,
        )
        return jsonify(response.to_dict()), status

    return _error_page(status, error.user_message, error.message)


def handle_400(error):
    """Handle 400 Bad Request errors."""
    logger.warning(f"400 error: {error} - URL: {request.url}")

    if _wants_json():
        response = ErrorResponse(
            message="The request could not be understood by the server",
            error_code=ErrorCode.INVALID_REQUEST,
        )
        return jsonify(response.to_dict()), 400

    return _error_page(400, "Bad Request", "The request could not be understood by the server")


def handle_404(error):
    """Handle 404 Not Found errors."""
    logger.info(f"404 error: {error} - URL: {request.url}")

    if _wants_json():
        return jsonify(ErrorResponse.not_found("Endpoint").to_dict()), 404

    return _error_page(404, "Page Not Found", "The page you are looking for does not exist")


def handle_405(error):
    """Handle 405 Method Not Allowed errors."""
    logger.info(f"405 error: {request.method} {request.url}")

    if _wants_json():
        response = ErrorResponse(
            message=f"Method {request.method} is not allowed for this endpoint",
            error_code=ErrorCode.INVALID_REQUEST,
        )
        return jsonify(response.to_dict()), 405

    return _error_page(405, "Method Not Allowed", "This action is not available here")


def handle_413(error):
    """Handle 413 Request Entity Too Large errors."""
    logger.warning(f"413 error: File too large - URL: {request.url}")

    if _wants_json():
        response = ErrorResponse(
            message="The uploaded images are too large",
            error_code=ErrorCode.VALIDATION_ERROR,
            field="images",
        )
        return jsonify(response.to_dict()), 413

    return _error_page(413, "File Too Large", "The uploaded images are too large")


def handle_500(error):
    """Handle 500 Internal Server errors."""
    logger.error(f"500 error: {error} - URL: {request.url}")

    if _wants_json():
        response = ErrorResponse(
            message="An unexpected error occurred. Please try again later.",
            error_code=ErrorCode.INTERNAL_ERROR,
        )
        return jsonify(response.to_dict()), 500

    return _error_page(500, "Internal Server Error", "An unexpected error occurred. Please try again later.")
