"""Worker for the quote service.

Starts a Temporal worker with the reconciliation workflow and both
activities registered on the configured task queue.

Usage::

    import asyncio
    from ammquote.infra.config import WorkerConfig
    from ammquote.workflow.worker import run_worker

    asyncio.run(run_worker(WorkerConfig.from_env()))
"""

from __future__ import annotations

from temporalio.client import Client
from temporalio.worker import Worker

from ammquote.infra.config import WorkerConfig
from ammquote.workflow.activities import price_quote, reconstruct_trade_activity
from ammquote.workflow.converter import AMMQUOTE_DATA_CONVERTER
from ammquote.workflow.reconcile_workflow import TradeReconciliationWorkflow


def build_worker(client: Client, task_queue: str) -> Worker:
    return Worker(
        client,
        task_queue=task_queue,
        workflows=[TradeReconciliationWorkflow],
        activities=[price_quote, reconstruct_trade_activity],
    )


async def run_worker(config: WorkerConfig | None = None) -> None:
    """Connect to Temporal and run the worker until interrupted."""
    config = WorkerConfig.from_env() if config is None else config
    client = await Client.connect(
        config.target_host, namespace=config.namespace,
        data_converter=AMMQUOTE_DATA_CONVERTER,
    )
    await build_worker(client, config.task_queue).run()
