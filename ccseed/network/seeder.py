"""Seeding orchestrator.

The Seeder contacts every configured seed concurrently and reduces the
outcomes to one AggregateResult. Individual seed failures are tolerated;
the run succeeds when the host registry grew and fails when it did not,
or when a systemic fault was reported.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Sequence

from ccseed.config.config import get_config
from ccseed.models import AggregateResult, SeedEndpoint, SeedOutcome
from ccseed.network.barrier import CompletionBarrier
from ccseed.network.seed_attempt import SeedAttempt
from ccseed.utils.logging_config import LoggingContext, correlation_scope
from ccseed.utils.tasks import BackgroundTaskGroup

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ccseed.models import SeederConfig
    from ccseed.network.interfaces import Connector, Handshaker, HostRegistry

REASON_SEEDED = "seeded"
REASON_NO_SEEDS = "no seeds configured"
REASON_NO_NEW_HOSTS = "no new hosts discovered"

_UNSET = object()


class Seeder:
    """Bootstrap the host registry from well-known seed endpoints."""

    def __init__(
        self,
        registry: HostRegistry,
        connector: Connector,
        handshaker: Handshaker,
        seeds: Sequence[SeedEndpoint] | None = None,
        attempt_timeout: float | None | object = _UNSET,
        config: SeederConfig | None = None,
    ):
        """Initialize seeder.

        Args:
            registry: Host registry receiving discovered addresses
            connector: Dials seed endpoints
            handshaker: Negotiates the protocol with each seed
            seeds: Seed endpoints (defaults to the configured list)
            attempt_timeout: Per-seed deadline in seconds, None for no limit
                (defaults to the configured value)
            config: Seeder configuration (defaults to the global config)

        """
        self.config = config or get_config().seeder
        self.registry = registry
        self.connector = connector
        self.handshaker = handshaker
        self.seeds: list[SeedEndpoint] = (
            list(seeds) if seeds is not None else self.config.endpoints()
        )
        self.attempt_timeout = (
            self.config.attempt_timeout
            if attempt_timeout is _UNSET
            else attempt_timeout
        )

        # Attempts outlive the run result while their sessions tear down
        self._attempts = BackgroundTaskGroup()
        self._store_groups: list[BackgroundTaskGroup] = []
        self.last_barrier: CompletionBarrier | None = None

        self.logger = logging.getLogger(__name__)

    async def start(
        self, seeds: Sequence[SeedEndpoint] | None = None
    ) -> AggregateResult:
        """Run one seeding pass and return its aggregate result."""
        seed_list = list(seeds) if seeds is not None else list(self.seeds)

        if not seed_list:
            self.logger.info("No seeds configured.")
            size = self.registry.size()
            return AggregateResult(
                outcome=SeedOutcome.SUCCESS,
                reason=REASON_NO_SEEDS,
                hosts_before=size,
                hosts_after=size,
            )

        scope = (
            correlation_scope()
            if get_config().observability.log_correlation_id
            else contextlib.nullcontext()
        )
        with scope:
            return await self._run(seed_list)

    async def _run(self, seed_list: list[SeedEndpoint]) -> AggregateResult:
        loop = asyncio.get_running_loop()
        result: asyncio.Future[AggregateResult] = loop.create_future()
        stores = BackgroundTaskGroup()
        self._store_groups = [group for group in self._store_groups if len(group)]
        self._store_groups.append(stores)
        hosts_before = self.registry.size()

        def on_all_attempts_done(error: BaseException | None) -> None:
            # May run on whichever thread delivered the final signal
            loop.call_soon_threadsafe(
                self._attempts.create,
                self._finish(error, hosts_before, stores, result),
            )

        with LoggingContext(
            "seeding", log_level=logging.INFO, logger=self.logger, seeds=len(seed_list)
        ):
            barrier = CompletionBarrier(len(seed_list), on_all_attempts_done)
            self.last_barrier = barrier

            for seed in seed_list:
                attempt = SeedAttempt(
                    seed,
                    self.connector,
                    self.handshaker,
                    self.registry,
                    barrier,
                    timeout=self.attempt_timeout,
                    relay=self.config.relay,
                    store_tasks=stores,
                )
                self._attempts.create(attempt.run(), name=f"seed:{seed}")

            return await result

    async def _finish(
        self,
        error: BaseException | None,
        hosts_before: int,
        stores: BackgroundTaskGroup,
        result: asyncio.Future[AggregateResult],
    ) -> None:
        if error is not None:
            # Only systemic faults reach here; they stop the whole run
            self.logger.error("Seeding failed: %s", error)
            aggregate = AggregateResult(
                outcome=SeedOutcome.FAILURE,
                reason=str(error),
                hosts_before=hosts_before,
                hosts_after=self.registry.size(),
            )
        else:
            # Stores submitted before the barrier fired count toward this run,
            # up to the per-seed deadline; a stalled registry must not hold
            # back the result
            if not await stores.join(timeout=self.attempt_timeout):
                self.logger.warning(
                    "Seeding result computed with %d address stores still pending",
                    len(stores),
                )
            hosts_after = self.registry.size()
            grew = hosts_after > hosts_before
            aggregate = AggregateResult(
                outcome=SeedOutcome.SUCCESS if grew else SeedOutcome.FAILURE,
                reason=REASON_SEEDED if grew else REASON_NO_NEW_HOSTS,
                hosts_before=hosts_before,
                hosts_after=hosts_after,
            )
            self.logger.info(
                "Seeding complete: %s (%d -> %d hosts)",
                aggregate.reason,
                hosts_before,
                hosts_after,
            )

        if not result.done():
            result.set_result(aggregate)

    async def stop(self, timeout: float | None = 5.0) -> None:
        """Cancel attempts and address stores still running after their run completed."""
        await self._attempts.cancel_and_wait(timeout=timeout)
        for stores in self._store_groups:
            await stores.cancel_and_wait(timeout=timeout)
        self._store_groups.clear()
