# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: HTTP access to the generic-crud / analyses-crud functions.

``/api/v1/functions/generic-crud/members/<id>`` runs the function with path
``/members/<id>``. Every outcome, including unsupported operations, is a
200 envelope.
"""
from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from skillmatrix.core.database import Database
from skillmatrix.core.dependencies import get_database
from skillmatrix.core.errors import UnsupportedOperationError
from skillmatrix.schemas.envelope import error_envelope
from skillmatrix.services.functions import FUNCTIONS, FunctionRequest, run

router = APIRouter(prefix="/api/v1/functions", tags=["Functions"])

METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


async def _invoke(name: str, path: str, request: Request, database: Database):
    if name not in FUNCTIONS:
        return error_envelope(UnsupportedOperationError(f"Unknown function '{name}'"))
    fn_request = FunctionRequest(
        method=request.method,
        path=f"/{path}",
        body=await request.body(),
        query=dict(request.query_params),
    )
    return await run_in_threadpool(run, name, database, fn_request)


@router.api_route("/{name}", methods=METHODS)
async def invoke_function(name: str, request: Request,
                          database: Database = Depends(get_database)):
    return await _invoke(name, "", request, database)


@router.api_route("/{name}/{path:path}", methods=METHODS)
async def invoke_function_path(name: str, path: str, request: Request,
                               database: Database = Depends(get_database)):
    return await _invoke(name, path, request, database)
