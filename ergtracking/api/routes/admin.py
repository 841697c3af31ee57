"""Admin view of recent submissions."""

from fastapi import APIRouter, Depends, Query

from ergtracking.api.dependencies import get_submission_store, require_identity
from ergtracking.api.schemas.schemas import SubmissionRows
from ergtracking.auth.models import Identity
from ergtracking.storage.submissions import DEFAULT_CAPACITY, SubmissionStore

router = APIRouter(prefix="/admin", tags=["admin"])


# Any logged-in user may read this; there is no role model.
@router.get("/submissions", response_model=SubmissionRows)
async def list_submissions(
    limit: int = Query(default=DEFAULT_CAPACITY, ge=1, le=DEFAULT_CAPACITY),
    identity: Identity = Depends(require_identity),
    store: SubmissionStore = Depends(get_submission_store),
) -> SubmissionRows:
    """List the most recent submissions."""
    return SubmissionRows(rows=store.list_recent(limit))
