from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..container import Container
from ..dependencies import get_container

router = APIRouter(prefix="/api", tags=["Gallery"])


@router.get("/images")
def list_images(container: Container = Depends(get_container)):
    return container.gallery.list_images()


@router.get("/search")
def search(q: Optional[str] = Query(None), container: Container = Depends(get_container)):
    return container.gallery.search(q)
