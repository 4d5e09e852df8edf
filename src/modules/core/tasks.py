"""Asynchronous tasks of the core module."""

from __future__ import annotations

import structlog
from celery import shared_task
from django.db import transaction
from django.db.models import Q

from modules.core.models import EventStatus, OutboxEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

OUTBOX_BATCH_SIZE = 100
OUTBOX_MAX_RETRIES = 5


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events(batch_size: int = OUTBOX_BATCH_SIZE) -> dict:
    """Drain pending outbox rows onto the in-process event bus.

    Rows are claimed with ``SELECT ... FOR UPDATE SKIP LOCKED`` so two
    workers never publish the same event.  Failed rows are retried until
    ``OUTBOX_MAX_RETRIES`` is reached.
    """
    published = 0
    failed = 0

    with transaction.atomic():
        batch = list(
            OutboxEvent.objects.select_for_update(skip_locked=True)
            .filter(
                Q(status=EventStatus.PENDING)
                | Q(status=EventStatus.FAILED, retry_count__lt=OUTBOX_MAX_RETRIES)
            )
            .order_by("created_at")[:batch_size]
        )

        for outbox_event in batch:
            log = logger.bind(
                outbox_id=str(outbox_event.id),
                event_type=outbox_event.event_type,
                aggregate_id=outbox_event.aggregate_id,
            )
            event_class = event_bus.resolve(outbox_event.event_type)
            if event_class is None:
                log.warning("outbox.unknown_event_type")
                outbox_event.mark_as_failed(
                    f"No subscriber registered for {outbox_event.event_type}."
                )
                failed += 1
                continue

            try:
                with transaction.atomic():
                    event_bus.publish(event_class.from_payload(outbox_event.payload))
            except Exception as exc:
                log.exception("outbox.publish_failed")
                outbox_event.mark_as_failed(str(exc))
                failed += 1
                continue

            outbox_event.mark_as_published()
            published += 1

    logger.info("outbox.drained", published=published, failed=failed)
    return {"published": published, "failed": failed}
