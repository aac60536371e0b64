"""POST /v1/callbacks/{payment,reversal} - gateway notification endpoints"""

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from vinti4_gateway.api.dependencies import get_client
from vinti4_gateway.api.rendering import render_receipt
from vinti4_gateway.api.v1.schemas import OutcomeResponse
from vinti4_gateway.client import Vinti4Client
from vinti4_gateway.domain.models import ResponseFlow

router = APIRouter()


async def _handle(request: Request, client: Vinti4Client, flow: ResponseFlow, output: str):
    form = await request.form()
    outcome = client.classify(dict(form), flow)

    # Always 200: verdicts (including TAMPERED) are reported, never retried
    if output == "html":
        return HTMLResponse(render_receipt(outcome))
    return OutcomeResponse(**outcome.to_dict())


@router.post("/callbacks/payment", response_model=None)
async def payment_callback(
    request: Request,
    format: str = Query("json", pattern="^(json|html)$"),
    client: Vinti4Client = Depends(get_client),
):
    """Classify the gateway's payment callback (form POST)"""
    return await _handle(request, client, ResponseFlow.PAYMENT, format)


@router.post("/callbacks/reversal", response_model=None)
async def reversal_callback(
    request: Request,
    format: str = Query("json", pattern="^(json|html)$"),
    client: Vinti4Client = Depends(get_client),
):
    """Classify the gateway's reversal callback (form POST)"""
    return await _handle(request, client, ResponseFlow.REVERSAL, format)
