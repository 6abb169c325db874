"""
Confirmation summary routes
"""
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from claimassist.api.deps import get_workflow, service_errors
from claimassist.services.confirmation import build_summary, format_money, summary_page_context
from claimassist.services.workflow import ClaimWorkflow

router = APIRouter()

TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["money"] = format_money


@router.get("/{claim_id}/summary")
async def get_summary(claim_id: str, workflow: ClaimWorkflow = Depends(get_workflow)):
    with service_errors():
        return build_summary(workflow.get(claim_id))


@router.get("/{claim_id}/summary/html", response_class=HTMLResponse)
async def get_summary_html(
    claim_id: str,
    request: Request,
    workflow: ClaimWorkflow = Depends(get_workflow),
):
    """Printable confirmation page."""
    with service_errors():
        context = summary_page_context(workflow.get(claim_id))
    return templates.TemplateResponse(request, "claim_summary.html", context)
