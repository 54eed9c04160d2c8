# app/api/v1/endpoints/projects.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_brandmentions_client, get_project_backend
from app.core.config import logger
from app.core.errors import ValidationError
from app.models.domain.projects import ProjectCreate, ProjectMentionsRequest
from app.services.brandmentions import BrandMentionsClient
from app.services.formatter import as_list, unwrap_envelope
from app.services.project_backend import ProjectBackendClient

router = APIRouter()


# --- Project backend (provisioning) ---

@router.post("/projects")
async def create_project(
    project_in: ProjectCreate,
    backend: ProjectBackendClient = Depends(get_project_backend),
):
    """Validates the wizard's project and hands it to the project backend for full setup."""
    payload = project_in.to_backend_payload()
    logger.info(f"Sending project data to backend: {payload}")
    data = await backend.full_setup(payload)
    return {
        "success": True,
        "message": "Project created successfully",
        "data": data,
    }


@router.post("/get_mentions")
async def fetch_project_mentions(
    request_in: ProjectMentionsRequest,
    backend: ProjectBackendClient = Depends(get_project_backend),
):
    """Asks the project backend to pull fresh mentions for a project."""
    if request_in.project_id is None or request_in.project_id == "":
        raise ValidationError("project_id is required", field="project_id")
    data = await backend.get_mentions(request_in.project_id)
    return {"success": True, "data": unwrap_envelope(data)}


# --- BrandMentions ---

@router.get("/projects")
async def list_projects(client: BrandMentionsClient = Depends(get_brandmentions_client)):
    payload = await client.list_projects()
    return {"success": True, "data": as_list(payload, "projects")}


@router.delete("/projects/{project_id}")
async def delete_project(project_id: str, client: BrandMentionsClient = Depends(get_brandmentions_client)):
    payload = await client.delete_project(project_id)
    logger.info(f"Deleted BrandMentions project {project_id}")
    return {"success": True, "data": unwrap_envelope(payload)}


@router.get("/projects/{project_id}/mentions-count")
async def get_mention_count(project_id: str, client: BrandMentionsClient = Depends(get_brandmentions_client)):
    payload = await client.get_mention_count(project_id)
    return {"success": True, "data": unwrap_envelope(payload)}


@router.get("/influencers")
async def list_influencers(
    projectId: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1),
    startPeriod: Optional[str] = Query(None),
    endPeriod: Optional[str] = Query(None),
    client: BrandMentionsClient = Depends(get_brandmentions_client),
):
    if not projectId:
        raise ValidationError("Project ID is required", field="projectId")
    payload = await client.get_project_influencers(
        projectId,
        page=page,
        per_page=per_page,
        start_period=startPeriod or None,
        end_period=endPeriod or None,
    )
    return {"success": True, "data": as_list(payload, "influencers")}


@router.get("/credits")
async def get_remaining_credits(client: BrandMentionsClient = Depends(get_brandmentions_client)):
    payload = await client.get_remaining_credits()
    return {"success": True, "data": unwrap_envelope(payload)}
