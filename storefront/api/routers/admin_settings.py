# storefront/api/routers/admin_settings.py
from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.data.redis_client import get_redis
from storefront.domain.entities import Neighborhood, StoreSettings
from storefront.domain.errors import BackendError, NotFoundError
from storefront.domain.schemas import NeighborhoodIn, NeighborhoodUpdate, SettingsUpdate
from storefront.repos.snapshot_repo import SnapshotRepo
from storefront.services.settings_service import SettingsService
from storefront.utils.settings import CATALOG_CACHE_TTL_SECONDS

router = APIRouter(prefix="/admin/settings", tags=["admin-settings"], dependencies=[Depends(require_admin)])


def get_service(db: Session, redis_client):
    return SettingsService(db, SnapshotRepo(redis_client, CATALOG_CACHE_TTL_SECONDS))


@router.get("", response_model=StoreSettings)
def get_settings(db: Session = Depends(get_db), redis_client=Depends(get_redis)):
    return get_service(db, redis_client).get_settings()


@router.patch("", response_model=StoreSettings)
def update_settings(payload: SettingsUpdate, db: Session = Depends(get_db), redis_client=Depends(get_redis)):
    svc = get_service(db, redis_client)
    try:
        return svc.update_settings(payload.model_dump(exclude_unset=True))
    except ValidationError as e:
        # zly fragment ustawien dostawy wychodzi dopiero po scaleniu
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/neighborhoods", response_model=Neighborhood, status_code=201)
def add_neighborhood(payload: NeighborhoodIn, db: Session = Depends(get_db), redis_client=Depends(get_redis)):
    svc = get_service(db, redis_client)
    try:
        return svc.add_neighborhood(payload.name, payload.fee)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.patch("/neighborhoods/{neighborhood_id}", response_model=Neighborhood)
def update_neighborhood(
    neighborhood_id: str,
    payload: NeighborhoodUpdate,
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    try:
        return svc.update_neighborhood(neighborhood_id, payload.model_dump(exclude_unset=True))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.delete("/neighborhoods/{neighborhood_id}", status_code=204)
def remove_neighborhood(neighborhood_id: str, db: Session = Depends(get_db), redis_client=Depends(get_redis)):
    svc = get_service(db, redis_client)
    try:
        svc.remove_neighborhood(neighborhood_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
