from __future__ import annotations
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from faultline.services.pipeline import ErrorPipeline


def register_exception_handler(app: FastAPI, pipeline: ErrorPipeline) -> None:
    """Report exceptions escaping request handlers, which never reach ``sys.excepthook``."""

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        # The channel send blocks, keep it off the event loop
        await run_in_threadpool(pipeline.on_uncaught_exception, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})
