from fastapi import APIRouter, Depends

from storeadmin.api.deps import require_user
from storeadmin.db.mongo import DocumentStore, get_store
from storeadmin.models.schemas import AuthState, DashboardResponse
from storeadmin.services.dashboard import DashboardView

router = APIRouter()


@router.get("/stats", response_model=DashboardResponse)
def stats(auth: AuthState = Depends(require_user), store: DocumentStore = Depends(get_store)):
    view = DashboardView(store).load()
    return DashboardResponse(loading=view.loading, stats=view.stats)
