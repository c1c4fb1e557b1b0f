from enum import Enum


class ErrorType(Enum):
    NOT_FOUND = "not_found"
    DATABASE_ERROR = "database_error"
    INTERNAL_ERROR = "internal_error"


# Map error types to HTTP status codes
ERROR_STATUS_MAP = {
    ErrorType.NOT_FOUND: 404,
    ErrorType.DATABASE_ERROR: 500,
    ErrorType.INTERNAL_ERROR: 500,
}

# Messages returned to the client
NOT_FOUND_MESSAGE = "Producto No Encontrado"
DATABASE_ERROR_MESSAGE = "Error en la base de datos"
INTERNAL_ERROR_MESSAGE = "Error interno del servidor"
