# FILE: app/sites/router.py
"""
Deployed site endpoints.

- POST   /api/websites/deploy          - create a site
- GET    /api/websites/list            - all sites, newest first
- GET    /api/websites/{path}          - one site
- PUT    /api/websites/{path}/content  - replace index.html
- PUT    /api/websites/{path}/config   - patch name/description
- DELETE /api/websites/{path}          - remove a site
- GET    /api/websites/{path}/files    - list files in the site directory

Store exceptions propagate to the handlers registered in main.py
(400 / 404 / 413 / 500 with an {"error": ...} body). Handlers are plain
def so the blocking file I/O runs in the threadpool.
"""
import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_site_store
from app.sites.schemas import DeployRequest, UpdateContentRequest, UpdateMetadataRequest
from app.sites.service import SiteNotFoundError, SiteStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/websites", tags=["websites"])


@router.post("/deploy")
def deploy_website(
    request: DeployRequest,
    store: SiteStore = Depends(get_site_store),
):
    record = store.deploy(
        html=request.html,
        path=request.path,
        name=request.name,
        description=request.description,
    )
    return {
        "success": True,
        "path": record.path,
        "url": record.url,
        "message": "网站部署成功",
    }


@router.get("/list")
def list_websites(store: SiteStore = Depends(get_site_store)):
    return {
        "success": True,
        "websites": [r.to_dict() for r in store.list_sites()],
    }


@router.get("/{path}")
def get_website(path: str, store: SiteStore = Depends(get_site_store)):
    record = store.get(path)
    if record is None:
        raise SiteNotFoundError(f"Website not found: {path}")
    return {"success": True, "website": record.to_dict()}


@router.put("/{path}/content")
def update_website_content(
    path: str,
    request: UpdateContentRequest,
    store: SiteStore = Depends(get_site_store),
):
    record = store.update_content(path, request.html)
    return {"success": True, "website": record.to_dict(), "message": "网站内容已更新"}


@router.put("/{path}/config")
def update_website_config(
    path: str,
    request: UpdateMetadataRequest,
    store: SiteStore = Depends(get_site_store),
):
    record = store.update_metadata(path, name=request.name, description=request.description)
    return {"success": True, "website": record.to_dict(), "message": "网站配置已更新"}


@router.delete("/{path}")
def delete_website(path: str, store: SiteStore = Depends(get_site_store)):
    store.delete(path)
    return {"success": True, "message": "网站已删除"}


@router.get("/{path}/files")
def list_website_files(path: str, store: SiteStore = Depends(get_site_store)):
    return {
        "success": True,
        "files": [f.to_dict() for f in store.list_files(path)],
    }
