from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from rich.traceback import Traceback
from starlette.exceptions import HTTPException

import door_studio.routers.compose as compose_router
from door_studio.config import CORS_ORIGINS
from door_studio.errors import ComposeError
from door_studio.logger import console


async def compose_error_handler(request: Request, exc: ComposeError):
    console.log(f"[yellow]{request.url.path} failed ({exc.status_code}): {exc.message}[/yellow]")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in errors
    )
    return JSONResponse(status_code=400, content={"error": message or "Invalid request"})


async def unexpected_error_handler(request: Request, exc: Exception):
    console.log(f"[red]Unexpected error on {request.url.path}[/red]")
    console.print(Traceback.from_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content={"error": "Compose failed"})


def create_app() -> FastAPI:

    app = FastAPI(title="Door AI Studio API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ComposeError, compose_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(compose_router.get_router(), prefix="/api")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
