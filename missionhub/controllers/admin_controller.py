# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Admin sidebar navigation.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from missionhub.core.dependencies import get_sidebar_builder
from missionhub.services.navigation import MenuItem, SidebarBuilder

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])


@router.get("/sidebar", response_model=List[MenuItem])
def sidebar(
    resource: str,
    resource_id: Optional[int] = None,
    parent_resource: Optional[str] = None,
    parent_id: Optional[int] = None,
    controller_path: Optional[str] = None,
    builder: SidebarBuilder = Depends(get_sidebar_builder),
):
    """Collection sidebar, or object sidebar when ``resource_id`` is given."""
    if (parent_resource is None) != (parent_id is None):
        raise HTTPException(status_code=400, detail="parent_resource and parent_id go together")
    parent = (parent_resource, parent_id) if parent_resource else None
    if resource_id is None:
        return builder.collection_sidebar(resource, parent=parent, controller_path=controller_path)
    return builder.object_sidebar(resource, resource_id, parent=parent,
                                  controller_path=controller_path)
