"""Form submission routes."""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends

from ergtracking.api.dependencies import (
    get_app_settings,
    get_notifier,
    get_submission_kind,
    get_submission_store,
    read_payload,
    require_identity,
)
from ergtracking.api.schemas.schemas import OkResponse
from ergtracking.auth.models import Identity
from ergtracking.core.config import Settings
from ergtracking.core.logging import get_logger
from ergtracking.storage.models import Submission, SubmissionKind
from ergtracking.storage.submissions import SubmissionStore
from ergtracking.webhooks.notifier import WebhookNotifier

logger = get_logger(__name__)
router = APIRouter(prefix="/submit", tags=["submissions"])


@router.post("/{kind}", response_model=OkResponse)
async def submit(
    background_tasks: BackgroundTasks,
    kind: SubmissionKind = Depends(get_submission_kind),
    identity: Identity = Depends(require_identity),
    payload: Any = Depends(read_payload),
    store: SubmissionStore = Depends(get_submission_store),
    notifier: WebhookNotifier = Depends(get_notifier),
    settings: Settings = Depends(get_app_settings),
) -> OkResponse:
    """Record a submission and relay it to the webhook.

    The acknowledgement does not depend on webhook delivery.
    """
    submission = Submission(kind=kind, user=identity, data=payload)
    store.append(submission)

    logger.info(
        "submission_recorded",
        kind=kind.value,
        user_id=identity.id,
        stored=len(store),
    )

    title = f"{notifier.brand} {kind.title}"
    if settings.webhook_background:
        background_tasks.add_task(notifier.notify, title, kind.value, identity, payload)
    else:
        await notifier.notify(title, kind.value, identity, payload)

    return OkResponse()
