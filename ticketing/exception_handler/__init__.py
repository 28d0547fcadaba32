from ticketing.exception_handler.exception_handler import app_error_handler, custom_exception_handler
from ticketing.exception_handler.exceptions import AppError, ValidationFailed, NotFoundError, InternalError
