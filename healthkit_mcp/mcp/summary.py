"""Combined health summary built from four concurrent metric queries"""
import asyncio

from healthkit_mcp.core.models import CombinedSummary, TimeWindow
from healthkit_mcp.mcp.queries import MetricQueryService


class SummaryAggregator:
    """Fan out the four metric queries and join them all-or-nothing"""

    def __init__(self, queries: MetricQueryService):
        self.queries = queries

    async def get_summary(self, window: TimeWindow) -> CombinedSummary:
        """
        Run steps, heart rate, sleep and active energy queries concurrently.

        The first failure observed is raised and sibling results are dropped;
        siblings still in flight are left to finish on their own.
        """
        steps = asyncio.ensure_future(self.queries.query_steps(window))
        heart_rate = asyncio.ensure_future(self.queries.query_heart_rate_samples(window))
        sleep = asyncio.ensure_future(self.queries.query_sleep_samples(window))
        active_energy = asyncio.ensure_future(self.queries.query_active_energy(window))
        tasks = [steps, heart_rate, sleep, active_energy]

        pending = set(tasks)
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_EXCEPTION)
            # Reading every exception marks it retrieved; tasks order keeps the pick stable
            failed = [task for task in tasks if task in done and task.exception() is not None]
            if failed:
                for other in pending:
                    # Late errors from discarded siblings are marked retrieved
                    other.add_done_callback(_consume_result)
                raise failed[0].exception()

        return CombinedSummary(
            window=window,
            steps=steps.result(),
            active_energy=active_energy.result(),
            heart_rate=tuple(heart_rate.result()),
            sleep=tuple(sleep.result()),
        )


def _consume_result(task: "asyncio.Future") -> None:
    if not task.cancelled():
        task.exception()
