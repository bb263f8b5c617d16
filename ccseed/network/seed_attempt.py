"""Lifecycle of a single seed contact.

A SeedAttempt connects to one seed, handshakes, requests the seed's address
list and hands the received addresses to the host registry. Whatever
happens along the way, it reports exactly one completion to the run's
CompletionBarrier.

All state is owned by the attempt's task. Session callbacks can arrive on
any thread and are marshalled onto the attempt's event loop before they
touch that state.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from ccseed.network.interfaces import AddressMessage, GetAddressMessage
from ccseed.utils.exceptions import (
    ChannelStoppedError,
    SeedTimeoutError,
    SystemicError,
)
from ccseed.utils.logging_config import log_exception
from ccseed.utils.tasks import BackgroundTaskGroup

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ccseed.models import NetworkAddress, SeedEndpoint
    from ccseed.network.barrier import CompletionBarrier
    from ccseed.network.interfaces import (
        Connector,
        Handshaker,
        HostRegistry,
        PeerSession,
    )


class SeedAttemptState(Enum):
    """Stages of a seed attempt."""

    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    HANDSHAKE_IN_FLIGHT = "handshake_in_flight"
    ADDRESS_REQUESTED = "address_requested"
    ADDRESS_RECEIVED = "address_received"
    TERMINATED = "terminated"


class _SessionEnded(Exception):
    """The session ended while a stage was in flight."""


class SeedAttempt:
    """Drive one seed endpoint from connect to teardown."""

    def __init__(
        self,
        seed: SeedEndpoint,
        connector: Connector,
        handshaker: Handshaker,
        registry: HostRegistry,
        barrier: CompletionBarrier,
        timeout: float | None = None,
        relay: bool = False,
        store_tasks: BackgroundTaskGroup | None = None,
    ):
        """Initialize seed attempt.

        Args:
            seed: Endpoint to contact
            connector: Dials the endpoint
            handshaker: Negotiates the protocol on the new session
            registry: Receives harvested addresses
            barrier: Run barrier to report completion to
            timeout: Deadline in seconds for the whole attempt (None = no limit)
            relay: Relay flag passed to the handshake
            store_tasks: Group tracking fire-and-forget address stores

        """
        self.seed = seed
        self.connector = connector
        self.handshaker = handshaker
        self.registry = registry
        self.barrier = barrier
        self.timeout = timeout
        self.relay = relay
        self.store_tasks = store_tasks if store_tasks is not None else BackgroundTaskGroup()

        self.state = SeedAttemptState.IDLE
        self.session: PeerSession | None = None
        self.addresses_received = 0

        self._signaled = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._ended: asyncio.Future[Exception | None] | None = None
        self._received: asyncio.Future[
            tuple[Exception | None, AddressMessage | None]
        ] | None = None

        self.logger = logging.getLogger(__name__)

    @property
    def signaled(self) -> bool:
        """Whether this attempt has reported to the barrier."""
        return self._signaled

    async def run(self) -> None:
        """Run the attempt to completion; reports to the barrier exactly once."""
        self._loop = asyncio.get_running_loop()
        self._ended = self._loop.create_future()
        self._received = self._loop.create_future()

        try:
            if self.timeout is None:
                await self._run_stages()
            else:
                await asyncio.wait_for(self._run_stages(), timeout=self.timeout)
        except asyncio.TimeoutError:
            self.logger.info(
                "Seed timed out [%s] after %.1fs in state %s",
                self.seed,
                self.timeout,
                self.state.value,
            )
            self._report()
            self._stop_session(SeedTimeoutError(f"Seed [{self.seed}] timed out"))
        except Exception as e:
            log_exception(
                self.logger, e, f"Unexpected failure seeding from [{self.seed}]"
            )
            self._report(SystemicError(f"Seed attempt [{self.seed}] failed: {e}"))
        finally:
            # Cancellation and every other exit still count as this attempt's outcome
            self._report()
            self._transition(SeedAttemptState.TERMINATED)

    async def _run_stages(self) -> None:
        self._transition(SeedAttemptState.CONNECTING)
        self.logger.info("Contacting seed [%s]", self.seed)
        try:
            session = await self.connector.connect(self.seed.host, self.seed.port)
        except Exception as e:
            self.logger.info("Failure contacting seed [%s] %s", self.seed, e)
            self._terminate()
            return

        self.session = session
        self._transition(SeedAttemptState.CONNECTED)
        self.logger.info("Get seed [%s] as [%s]", self.seed, session.address)

        # Subscribe before starting so an early disconnect is never missed
        session.subscribe_stop(self._on_session_stopped)
        session.start()

        self._transition(SeedAttemptState.HANDSHAKE_IN_FLIGHT)
        try:
            await self._until_ended(self.handshaker.perform(session, relay=self.relay))
        except _SessionEnded:
            return
        except Exception as e:
            self.logger.debug(
                "Failure in handshake with seed [%s] %s", session.address, e
            )
            self._terminate(stop_session=True)
            return

        session.subscribe_address(self._on_address)
        self._transition(SeedAttemptState.ADDRESS_REQUESTED)
        try:
            await self._until_ended(session.send(GetAddressMessage()))
        except _SessionEnded:
            return
        except Exception as e:
            self.logger.debug(
                "Failure sending get address to seed [%s] %s", self.seed, e
            )
            self._terminate(stop_session=True)
            return

        try:
            error, message = await self._until_ended(self._received)
        except _SessionEnded:
            return
        self._handle_received(error, message)

    async def _until_ended(self, awaitable: Awaitable[Any]) -> Any:
        """Await a stage unless the session ends first."""
        stage = asyncio.ensure_future(awaitable)
        try:
            done, _ = await asyncio.wait(
                {stage, self._ended}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            if not stage.done():
                stage.cancel()
        if stage in done:
            return stage.result()
        raise _SessionEnded

    def _handle_received(
        self, error: Exception | None, message: AddressMessage | None
    ) -> None:
        self._transition(SeedAttemptState.ADDRESS_RECEIVED)

        # A response, good or bad, fulfils this attempt's part of the run
        self._report()

        if error is not None:
            self.logger.debug(
                "Failure getting addresses from seed [%s] %s", self.seed, error
            )
        else:
            addresses = message.addresses if message is not None else []
            self.addresses_received = len(addresses)
            self.logger.info(
                "Storing addresses from seed [%s] (%d)", self.seed, len(addresses)
            )
            for address in addresses:
                self.store_tasks.create(self._store(address))

        # The session stays referenced until here so the response is fully read
        self._stop_session(ChannelStoppedError())
        self._transition(SeedAttemptState.TERMINATED)

    async def _store(self, address: NetworkAddress) -> None:
        try:
            await self.registry.store(address)
        except Exception as e:
            self.logger.error("Failure storing address from seed: %s", e)

    def _on_session_stopped(self, reason: Exception | None) -> None:
        self._post(self._handle_stop, reason)

    def _on_address(
        self, error: Exception | None, message: AddressMessage | None
    ) -> None:
        self._post(self._handle_address, error, message)

    def _post(self, callback: Callable[..., None], *args: Any) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        # The loop may close between the check and the call during shutdown
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(callback, *args)

    def _handle_stop(self, reason: Exception | None) -> None:
        if self._ended is not None and not self._ended.done():
            self._ended.set_result(reason)
        if self._signaled:
            return
        if not isinstance(reason, ChannelStoppedError):
            self.logger.debug("Seed channel stopped [%s] %s", self.seed, reason)
        self._terminate()

    def _handle_address(
        self, error: Exception | None, message: AddressMessage | None
    ) -> None:
        if self._received is None or self._received.done():
            return
        self._received.set_result((error, message))

    def _terminate(self, stop_session: bool = False) -> None:
        self._report()
        if stop_session:
            self._stop_session(ChannelStoppedError())
        self._transition(SeedAttemptState.TERMINATED)

    def _report(self, error: BaseException | None = None) -> bool:
        if self._signaled:
            return False
        self._signaled = True
        self.barrier.signal(error)
        return True

    def _stop_session(self, reason: Exception) -> None:
        if self.session is None:
            return
        try:
            self.session.stop(reason)
        except Exception as e:
            self.logger.debug("Failure stopping seed session [%s] %s", self.seed, e)

    def _transition(self, state: SeedAttemptState) -> None:
        if self.state == SeedAttemptState.TERMINATED or self.state == state:
            return
        self.logger.debug(
            "Seed [%s] state transition: %s -> %s",
            self.seed,
            self.state.value,
            state.value,
        )
        self.state = state
