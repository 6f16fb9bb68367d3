"""Advanced queue engine.

Layers priority ordering, delayed delivery, retry with backoff,
dead-lettering, idempotent enqueue and optional snapshot persistence on
top of three ordered in-memory collections.

Every queue operation is synchronous and runs to completion. The only
asynchronous work is snapshot save/load and the two optional background
loops (delayed-message sweep and periodic save), which run as asyncio tasks
once the queue is initialized inside a running event loop.

Example:
    >>> from queuespine.queue.advanced import AdvancedQueue
    >>> queue = AdvancedQueue()
    >>> _ = queue.enqueue("low", priority=1)
    >>> _ = queue.enqueue("high", priority=10)
    >>> queue.dequeue().payload
    'high'
    >>> queue.size()
    1
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import Counter
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from queuespine.core.persistence import SnapshotPersistence
from queuespine.models.message import MessageStatus, QueueMessage
from queuespine.models.options import QueueOptions
from queuespine.models.snapshot import QueueSnapshot
from queuespine.protocols.storage import StorageDriver
from queuespine.queue.scheduler import DelayScheduler
from queuespine.queue.store import Collection, MessageStore
from queuespine.storage.factory import StorageOptions, create_storage_driver
from queuespine.storage.memory import MemoryStorageDriver
from queuespine.utils.clock import Clock, add_seconds, utc_now
from queuespine.utils.ids import generate_id

T = TypeVar("T")

EnqueueListener = Callable[[QueueMessage[Any]], None]


class AdvancedQueue(Generic[T]):
    """Priority queue with delays, retries, dead-lettering and persistence.

    Messages move through the states below::

        Pending --dequeue--> Processing --complete--> Completed
        Processing --fail (attempts < max_retries)--> Delayed --elapsed--> Pending
        Processing --fail (exhausted, dead-lettering on)--> DeadLetter
        Processing --fail (exhausted, dead-lettering off)--> Failed
        DeadLetter --retry_dead_letter--> Pending

    Completed and Failed messages are never removed automatically; they
    stay in the ready collection until ``clear()`` or ``dispose()``.

    Args:
        options: Queue options (keyword overrides are merged on top).
        storage: Storage driver for snapshots. Defaults to the driver named
            by ``options.persistence_driver``.
        clock: Callable returning the current UTC datetime.
        logger: Logger for diagnostics (default: module logger).

    Example:
        >>> from queuespine.queue.advanced import AdvancedQueue
        >>> queue = AdvancedQueue(max_retries=1)
        >>> msg = queue.enqueue({"task": "email"})
        >>> _ = queue.dequeue()
        >>> queue.fail(msg.id, "smtp down")
        True
        >>> [m.id for m in queue.get_dead_letter_messages()] == [msg.id]
        True
    """

    def __init__(
        self,
        options: QueueOptions | None = None,
        *,
        storage: StorageDriver | None = None,
        clock: Clock | None = None,
        logger: logging.Logger | None = None,
        **overrides: Any,
    ) -> None:
        if options is None:
            options = QueueOptions(**overrides)
        elif overrides:
            options = QueueOptions(**{**options.model_dump(), **overrides})
        self._options = options
        self._clock = clock or utc_now
        self._logger = logger or logging.getLogger(__name__)
        self._queue_id = options.queue_id or generate_id(self._clock())

        self._store = MessageStore()
        self._scheduler = DelayScheduler()
        self._processing: set[str] = set()
        self._enqueue_listeners: list[EnqueueListener] = []

        if storage is None:
            storage = self._create_storage()
        self._persistence = SnapshotPersistence(storage, self._queue_id, self._logger)

        self._startup: asyncio.Future[None] | None = None
        self._persistence_task: asyncio.Task[None] | None = None
        self._delayed_check_task: asyncio.Task[None] | None = None

        # Start background work right away when constructed inside a loop
        if options.persistence_enabled or options.auto_check_delayed:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                # No running loop - initialize() starts it later
                pass
            else:
                self._startup = loop.create_task(self._start())

    def _create_storage(self) -> StorageDriver:
        if not self._options.persistence_enabled:
            return MemoryStorageDriver()
        storage_options = StorageOptions()
        if self._options.storage_dir is not None:
            storage_options.data_dir = self._options.storage_dir
        return create_storage_driver(
            self._options.persistence_driver,
            storage_options,
            log=self._logger,
        )

    # --- Properties ---

    @property
    def queue_id(self) -> str:
        """Identifier used for the persisted snapshot key."""
        return self._queue_id

    @property
    def options(self) -> QueueOptions:
        """Effective options."""
        return self._options

    @property
    def persistence(self) -> SnapshotPersistence:
        """Snapshot persistence adapter."""
        return self._persistence

    @property
    def last_persistence_error(self) -> str | None:
        """Most recent save/load failure, if any."""
        return self._persistence.stats.last_error

    # --- Lifecycle ---

    async def initialize(self) -> None:
        """Load the last snapshot and start background loops.

        With persistence enabled, the stored snapshot replaces in-memory
        state wholesale. Anything enqueued before the load finishes is
        discarded, not merged.

        This is idempotent - calling multiple times is safe.
        """
        if self._startup is None:
            self._startup = asyncio.ensure_future(self._start())
        await self._startup

    async def _start(self) -> None:
        if self._options.persistence_enabled:
            await self.load_state()
            if self._persistence_task is None:
                self._persistence_task = asyncio.create_task(
                    self._persistence_loop(), name=f"queue-{self._queue_id}-persist"
                )
        if self._options.auto_check_delayed and self._delayed_check_task is None:
            self._delayed_check_task = asyncio.create_task(
                self._delayed_check_loop(), name=f"queue-{self._queue_id}-delayed"
            )

    async def _persistence_loop(self) -> None:
        while True:
            await asyncio.sleep(self._options.persistence_interval)
            await self.save_state()

    async def _delayed_check_loop(self) -> None:
        while True:
            await asyncio.sleep(self._options.delayed_check_interval)
            try:
                self.check_delayed_messages()
            except Exception as e:
                self._logger.error(f"Delayed message check failed: {e}")

    def _cancel_tasks(self) -> list[asyncio.Future[None]]:
        tasks = [
            t
            for t in (self._startup, self._persistence_task, self._delayed_check_task)
            if t is not None
        ]
        for task in tasks:
            task.cancel()
        self._startup = None
        self._persistence_task = None
        self._delayed_check_task = None
        return tasks

    def dispose(self) -> None:
        """Cancel background loops and drop all messages."""
        self._cancel_tasks()
        self.clear()

    async def close(self) -> None:
        """Dispose the queue and wait for background loops to stop."""
        tasks = self._cancel_tasks()
        self.clear()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        close = getattr(self._persistence.driver, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> AdvancedQueue[T]:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # --- Persistence ---

    def snapshot(self) -> QueueSnapshot:
        """Deep copy of the full queue state."""
        return QueueSnapshot(
            messages=[m.snapshot() for m in self._store.messages(Collection.READY)],
            delayed_messages=[m.snapshot() for m in self._store.messages(Collection.DELAYED)],
            dead_letter_messages=[
                m.snapshot() for m in self._store.messages(Collection.DEAD_LETTER)
            ],
            queue_id=self._queue_id,
        )

    async def save_state(self) -> bool:
        """Persist the full queue state.

        Failures are logged and recorded, never raised.

        Returns:
            True if the snapshot was written.
        """
        if not self._options.persistence_enabled:
            return False
        return await self._persistence.save(self.snapshot())

    async def load_state(self) -> bool:
        """Replace in-memory state with the last persisted snapshot.

        Returns:
            True if a snapshot was restored.
        """
        if not self._options.persistence_enabled:
            return False

        snapshot = await self._persistence.load()
        if snapshot is None:
            return False

        dropped = self._store.replace(
            snapshot.messages,
            snapshot.delayed_messages,
            snapshot.dead_letter_messages,
        )
        if dropped:
            self._logger.warning(f"Dropped {dropped} duplicate message(s) from snapshot")
        self._processing = {
            m.id for m in self._store.iter_all() if m.status == MessageStatus.PROCESSING
        }
        self.check_delayed_messages()
        self._logger.info(
            f"Restored {self._store.total()} message(s) for queue {self._queue_id}"
        )
        return True

    # --- Delay scheduling ---

    def check_delayed_messages(self) -> list[QueueMessage[T]]:
        """Promote delayed messages whose delay has elapsed.

        Returns:
            The promoted messages.
        """
        promoted = self._scheduler.sweep(self._store, self._clock())
        if promoted:
            self._logger.debug(f"Promoted {len(promoted)} delayed message(s)")
        return promoted

    # --- Producer API ---

    def enqueue(
        self,
        payload: T,
        *,
        priority: int = 0,
        delay: float = 0,
        id: str | None = None,
    ) -> QueueMessage[T]:
        """Add a message to the queue.

        If ``id`` matches a message already held in any collection, that
        message is returned unchanged and nothing else happens.

        Args:
            payload: Message data.
            priority: Higher priorities are dequeued first.
            delay: Seconds before the message becomes eligible.
            id: Caller-assigned id for idempotent enqueue.

        Returns:
            The stored message.
        """
        if id:
            existing = self._store.find(id)
            if existing is not None:
                return existing

        now = self._clock()
        message_id = id
        if not message_id:
            message_id = generate_id(now)
            while message_id in self._store:
                message_id = generate_id(now)

        is_delayed = delay is not None and delay > 0
        message: QueueMessage[T] = QueueMessage(
            id=message_id,
            payload=payload,
            status=MessageStatus.DELAYED if is_delayed else MessageStatus.PENDING,
            priority=priority or 0,
            created_at=now,
            updated_at=now,
            delay_until=add_seconds(now, delay) if is_delayed else None,
        )
        self._store.insert(Collection.DELAYED if is_delayed else Collection.READY, message)

        for listener in list(self._enqueue_listeners):
            try:
                listener(message)
            except Exception as e:
                self._logger.error(f"Enqueue listener failed for message {message_id}: {e}")

        return message

    def add_enqueue_listener(self, listener: EnqueueListener) -> Callable[[], None]:
        """Observe newly created messages.

        Listeners are not called for idempotent hits on an existing id.

        Returns:
            A function that removes the listener.
        """
        self._enqueue_listeners.append(listener)

        def remove() -> None:
            if listener in self._enqueue_listeners:
                self._enqueue_listeners.remove(listener)

        return remove

    # --- Consumer API ---

    def peek(self) -> QueueMessage[T] | None:
        """Return the next Pending message without changing it."""
        self.check_delayed_messages()
        for message in self._store.messages(Collection.READY):
            if message.is_pending:
                return message
        return None

    def dequeue(self) -> QueueMessage[T] | None:
        """Take the next Pending message and mark it Processing.

        Processing messages are never returned again until they are
        completed, failed or cleared.
        """
        message = self.peek()
        if message is None:
            return None

        now = self._clock()
        message.status = MessageStatus.PROCESSING
        message.processing_started_at = now
        message.updated_at = now
        self._processing.add(message.id)
        return message

    def complete(self, message_id: str) -> bool:
        """Mark a message Completed.

        Returns:
            False if the id is unknown.
        """
        message = self._store.find(message_id)
        if message is None:
            return False

        message.status = MessageStatus.COMPLETED
        message.updated_at = self._clock()
        self._processing.discard(message_id)
        return True

    def fail(self, message_id: str, reason: str | None = None) -> bool:
        """Record a failed processing attempt.

        Below ``max_retries`` attempts the message is delayed by
        ``retry_delay`` and retried. Once exhausted it moves to the
        dead-letter collection, or is parked as Failed in the ready
        collection when dead-lettering is disabled.

        Returns:
            False if the id is unknown.
        """
        entry = self._store.locate(message_id)
        if entry is None:
            return False

        collection, message = entry
        now = self._clock()
        attempts = message.processing_attempts + 1
        retry_at = add_seconds(now, self._options.retry_delay)

        message.status = MessageStatus.FAILED
        message.updated_at = now
        message.failure_reason = reason
        message.processing_attempts = attempts
        self._processing.discard(message_id)

        if attempts < self._options.max_retries:
            message.status = MessageStatus.DELAYED
            message.delay_until = retry_at
            self._store.move(message_id, Collection.DELAYED)
            self._logger.debug(
                f"Message {message_id} failed (attempt {message.processing_attempts}/"
                f"{self._options.max_retries}); retrying at {message.delay_until.isoformat()}"
            )
            if self._options.auto_check_delayed:
                self.check_delayed_messages()
        elif self._options.dead_letter_enabled:
            message.status = MessageStatus.DEAD_LETTER
            self._store.move(message_id, Collection.DEAD_LETTER)
            self._logger.info(
                f"Message {message_id} moved to dead-letter after "
                f"{message.processing_attempts} attempt(s): {reason}"
            )
        else:
            message.delay_until = None
            if collection != Collection.READY:
                self._store.move(message_id, Collection.READY)
            self._logger.info(
                f"Message {message_id} failed permanently after "
                f"{message.processing_attempts} attempt(s): {reason}"
            )

        return True

    def find_message_by_id(self, message_id: str) -> QueueMessage[T] | None:
        """Look up a message in any collection."""
        return self._store.find(message_id)

    def cancel_delayed(self, message_id: str) -> bool:
        """Remove a message from the delayed collection.

        Returns:
            False if the message is not currently delayed, including when
            it has already been promoted.
        """
        entry = self._store.locate(message_id)
        if entry is None or entry[0] != Collection.DELAYED:
            return False
        self._store.remove(message_id)
        return True

    def retry_dead_letter(self, message_id: str) -> bool:
        """Move a dead-letter message back to the ready collection.

        Processing attempts are reset to 0 and failure metadata is cleared.

        Returns:
            False if the id is not in the dead-letter collection.
        """
        entry = self._store.locate(message_id)
        if entry is None or entry[0] != Collection.DEAD_LETTER:
            return False

        self._store.remove(message_id)
        message = entry[1]
        message.processing_attempts = 0
        message.processing_started_at = None
        message.status = MessageStatus.PENDING
        message.updated_at = self._clock()
        message.failure_reason = None
        message.delay_until = None
        self._store.insert(Collection.READY, message)
        return True

    # --- Inspection ---

    def get_delayed_messages(self) -> list[QueueMessage[T]]:
        """Copies of delayed messages, earliest first."""
        return [m.snapshot() for m in self._store.messages(Collection.DELAYED)]

    def get_dead_letter_messages(self) -> list[QueueMessage[T]]:
        """Copies of dead-letter messages, in arrival order."""
        return [m.snapshot() for m in self._store.messages(Collection.DEAD_LETTER)]

    def get_all_messages(self) -> list[QueueMessage[T]]:
        """Copies of every message: ready, then delayed, then dead-letter."""
        return [m.snapshot() for m in self._store.iter_all()]

    def to_array(self) -> list[QueueMessage[T]]:
        """Copies of Pending messages in dequeue order."""
        return [m.snapshot() for m in self._store.messages(Collection.READY) if m.is_pending]

    def size(self) -> int:
        """Number of Pending messages in the ready collection."""
        return sum(1 for m in self._store.messages(Collection.READY) if m.is_pending)

    def total_size(self) -> int:
        """Number of messages across all collections."""
        return self._store.total()

    def is_empty(self) -> bool:
        """True if no message is Pending."""
        return self.size() == 0

    def processing_count(self) -> int:
        """Number of dequeued messages awaiting complete/fail."""
        return len(self._processing)

    def stats(self) -> dict[str, int]:
        """Message counts per status plus collection sizes."""
        counts = Counter(m.status.value for m in self._store.iter_all())
        result = {status.value: counts.get(status.value, 0) for status in MessageStatus}
        result["total"] = self._store.total()
        result["ready"] = self._store.count(Collection.READY)
        result["delayed_collection"] = self._store.count(Collection.DELAYED)
        result["dead_letter_collection"] = self._store.count(Collection.DEAD_LETTER)
        return result

    def clear(self) -> None:
        """Drop all messages and in-flight tracking."""
        self._store.clear()
        self._processing.clear()
