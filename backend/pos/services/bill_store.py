# backend/pos/services/bill_store.py
import logging
from contextlib import contextmanager
from datetime import timedelta

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from ..models import BillDraft
from . import errors
from .bill import BillComposer

logger = logging.getLogger(__name__)


def _is_stale(draft: BillDraft) -> bool:
    age_limit = timedelta(seconds=settings.POS_BILL_TTL_SECONDS)
    return draft.updated_at < timezone.now() - age_limit


def _load_draft(user):
    draft = BillDraft.objects.filter(operator_id=user.pk).first()
    if draft is None:
        return None
    if _is_stale(draft):
        logger.info("Dropping abandoned in-progress bill for user %s", user.pk)
        draft.delete()
        return None
    return draft


def _composer_for(draft, user) -> BillComposer:
    if draft is None:
        return BillComposer()
    try:
        return BillComposer.from_blob(draft.items)
    except (ValueError, TypeError):
        logger.warning("Discarding unreadable in-progress bill for user %s", user.pk)
        draft.delete()
        return BillComposer()


def load_bill(user) -> BillComposer:
    return _composer_for(_load_draft(user), user)


def save_bill(user, composer: BillComposer) -> None:
    if composer.is_empty:
        discard_bill(user)
        return
    blob = composer.to_blob()
    now = timezone.now()
    try:
        updated = BillDraft.objects.filter(operator_id=user.pk).update(
            items=blob, updated_at=now, revision=F("revision") + 1
        )
        if not updated:
            try:
                with transaction.atomic():
                    BillDraft.objects.create(operator=user, items=blob, updated_at=now)
            except IntegrityError:
                # created by a parallel request in between
                BillDraft.objects.filter(operator_id=user.pk).update(
                    items=blob, updated_at=now, revision=F("revision") + 1
                )
    except DatabaseError as exc:
        logger.exception("Failed to save in-progress bill for user %s", user.pk)
        raise errors.PersistenceError(f"Failed to save bill: {exc}") from exc


def discard_bill(user) -> None:
    BillDraft.objects.filter(operator_id=user.pk).delete()


@contextmanager
def claimed_bill(user):
    """
    Hand the operator's bill to a finalize call.

    The draft row is deleted at the revision that was read, inside one
    transaction: a second submit finds no bill, a bill edited in between is a
    conflict, and an error raised in the block rolls the draft back so the
    bill stays intact for a retry.
    """
    with transaction.atomic():
        draft = _load_draft(user)
        composer = _composer_for(draft, user)
        if not composer.is_empty:
            claimed, _ = BillDraft.objects.filter(pk=draft.pk, revision=draft.revision).delete()
            if not claimed:
                raise errors.BillConflict()
        yield composer
