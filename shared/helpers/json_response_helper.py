from fastapi import HTTPException


def error_response(message: str, http_status: int = 400):
    """Abort the request; the exception handler renders it as {"error": message}."""
    raise HTTPException(status_code=http_status, detail=message)


def not_found(entity: str):
    return error_response(f"{entity} not found", http_status=404)
