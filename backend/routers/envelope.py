from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(data=None, status_code: int = 200) -> JSONResponse:
    """Wrap a payload as {success: true, data}"""
    content = {"success": True}
    if data is not None:
        content["data"] = jsonable_encoder(data, by_alias=True)
    return JSONResponse(status_code=status_code, content=content)


def failure(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})
