from savedsearch_mds.routers.saved_search import savedSearchRouter
from savedsearch_mds.routers.search import searchRouter
from savedsearch_mds.middleware.process_time import add_process_time_header

from savedsearch_mds.core.logging import requestLogger, crudLogger
from savedsearch_mds.core.config import settings

from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import FastAPI, Request
from pymongo.errors import PyMongoError

import logfire

app = FastAPI(
	title="Saved Search API",
	description="Stores saved multi-entity filter definitions and executes them against project records"
)

if settings.LOGFIRE_ENV and settings.LOGFIRE_TOKEN:
    logfire.configure(
        environment = settings.LOGFIRE_ENV,
        token = settings.LOGFIRE_TOKEN
    )
    logfire.instrument_fastapi(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware('http')
async def LogRequestMiddleware(
    request: Request,
    call_next
):
    # track user agent
    requestPath = request.url.path
    requestUserAgent = request.headers.get("User-Agent")
    if request.client:
        requestClientAddress = request.client.host
    else:
        requestClientAddress = None

    #log the request
    requestLogger.info(f"Path: {requestPath}\tUserAgent: {requestUserAgent}\tIP: {requestClientAddress}")

    response = await call_next(request)
    return response

app.middleware('http')(add_process_time_header)


@app.exception_handler(PyMongoError)
async def storeErrorHandler(request: Request, exc: PyMongoError):
    crudLogger.error(f"data store failure\tPath: {request.url.path}\terror: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"error": "data store unavailable"}
    )


app.include_router(savedSearchRouter, prefix="/api")
app.include_router(searchRouter, prefix="/api")


@app.get("/healthz")
def health_check():
    return {"status": "healthy"}
