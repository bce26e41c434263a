from app.schemas.common import ErrorResponse

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Not found"}}
