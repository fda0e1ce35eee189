"""Portal Handlers Package"""

from portal.handlers.operation_handler import OperationHandler, get_operation_handler

__all__ = ["OperationHandler", "get_operation_handler"]
