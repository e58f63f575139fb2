# spmanager/api/v1/routers/cms.py
from fastapi import APIRouter, Depends, Request

from spmanager.services.cms_client import CMSClient, get_cms_client

router = APIRouter(prefix="/cms", tags=["cms"])


@router.get("/{path:path}")
async def proxy_cms(path: str, request: Request, cms: CMSClient = Depends(get_cms_client)):
    """
    Forward a read-only request to the content service and return its JSON.

    Error codes:
        - CMS_DISABLED (404): No CMS_API_URL configured
        - UPSTREAM_ERROR (502): Content service unreachable or failed
    """
    return await cms.get_json(path, params=dict(request.query_params))
