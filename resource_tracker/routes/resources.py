"""Resource routes."""
import csv
import io
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from fastapi.responses import StreamingResponse

from resource_tracker.forms.resource import ResourceForm
from resource_tracker.models.resource import RESOURCE_STATUSES
from resource_tracker.routes.deps import get_state, raise_for_result, require_identity
from resource_tracker.schemas.resource import Resource, ResourceDraft, ResourceListResponse
from resource_tracker.schemas.user import Identity
from resource_tracker.state import TrackerState
from resource_tracker.state.resources import ResourceCollection

router = APIRouter(prefix="/resources", tags=["Resources"])

CSV_FIELDS = [
    "title", "description", "category", "status", "quantity", "unit", "cost",
    "supplier", "url", "location", "notes", "minimum_stock", "created_at", "updated_at",
]


def _list_response(collection: ResourceCollection, resources: List[Resource]) -> ResourceListResponse:
    return ResourceListResponse(
        resources=resources,
        total=len(collection.resources),
        loading=collection.loading,
        error=collection.error,
        categories=collection.categories_in_use(),
        statuses=["All"] + RESOURCE_STATUSES,
    )


@router.get("/", response_model=ResourceListResponse)
async def list_resources(
    search: Optional[str] = Query(None, description="Search by title or description"),
    category: Optional[str] = Query(None, description="Filter by category"),
    resource_status: Optional[str] = Query(None, alias="status", description="Filter by status"),
    state: TrackerState = Depends(get_state),
    current_user: Identity = Depends(require_identity)
):
    """List the signed-in user's resources, optionally filtered."""
    collection = state.resources
    return _list_response(collection, collection.search(search, category, resource_status))


@router.post("/refresh", response_model=ResourceListResponse)
async def refresh_resources(
    state: TrackerState = Depends(get_state),
    current_user: Identity = Depends(require_identity)
):
    """Reload resources from the data service (retry after a failed load)."""
    raise_for_result(await state.resources.fetch_all())
    return _list_response(state.resources, state.resources.resources)


@router.post("/", response_model=Resource, status_code=status.HTTP_201_CREATED)
async def create_resource(
    draft: ResourceDraft,
    state: TrackerState = Depends(get_state),
    current_user: Identity = Depends(require_identity)
):
    """Create a new resource from the add form."""
    form = ResourceForm(state.resources)
    form.update(**draft.model_dump())
    result = raise_for_result(await form.submit())
    return result.data


@router.get("/export/csv")
async def export_resources_csv(
    state: TrackerState = Depends(get_state),
    current_user: Identity = Depends(require_identity)
):
    """Export the loaded resources to a CSV file."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_FIELDS)
    for resource in state.resources.resources:
        values = resource.model_dump(mode="json")
        writer.writerow(["" if values[field] is None else values[field] for field in CSV_FIELDS])

    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=resources.csv"}
    )


@router.get("/{resource_id}", response_model=Resource)
async def get_resource(
    resource_id: str,
    state: TrackerState = Depends(get_state),
    current_user: Identity = Depends(require_identity)
):
    """Get a specific resource from the loaded collection."""
    resource = state.resources.get_by_id(resource_id)
    if not resource:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resource not found"
        )
    return resource


@router.put("/{resource_id}", response_model=Resource)
async def update_resource(
    resource_id: str,
    draft: ResourceDraft,
    state: TrackerState = Depends(get_state),
    current_user: Identity = Depends(require_identity)
):
    """Update a resource from the edit form. Fields left out keep their values."""
    form = ResourceForm(state.resources, edit_id=resource_id)
    if form.not_found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=form.error
        )
    form.update(**draft.model_dump(exclude_unset=True))
    result = raise_for_result(await form.submit())
    return result.data


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resource(
    resource_id: str,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    state: TrackerState = Depends(get_state),
    current_user: Identity = Depends(require_identity)
):
    """Delete a resource after explicit confirmation."""
    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Deletion must be confirmed with confirm=true"
        )
    raise_for_result(await state.resources.remove(resource_id))
    return None
