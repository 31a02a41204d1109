"""Tool dispatch: operation name + arguments -> text result

Every failure, expected or not, is turned into an error ToolResult here;
nothing raised below this layer reaches the protocol.
"""
import time
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from healthkit_mcp.core.errors import HealthKitError, UnknownOperationError
from healthkit_mcp.core.logging_setup import get_logger
from healthkit_mcp.core.models import TimeWindow, ToolInvocation, ToolResult
from healthkit_mcp.mcp.formatting import (
    render_combined,
    render_cumulative,
    render_heart_rate,
    render_sleep,
)
from healthkit_mcp.mcp.queries import MetricQueryService
from healthkit_mcp.mcp.summary import SummaryAggregator
from healthkit_mcp.providers.base import HealthDataProvider
from healthkit_mcp.transforms.datetime_utils import parse_date_range

logger = get_logger("mcp.dispatcher")

DATE_RANGE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "start_date": {
            "type": "string",
            "description": "Start date in YYYY-MM-DD format",
        },
        "end_date": {
            "type": "string",
            "description": "End date in YYYY-MM-DD format",
        },
    },
    "required": ["start_date", "end_date"],
}

# Tool catalog: name -> description (all tools take DATE_RANGE_SCHEMA)
TOOL_DESCRIPTIONS: Dict[str, str] = {
    "get_steps": "Retrieve step count data for a specified date range",
    "get_heart_rate": "Retrieve heart rate samples for a specified date range",
    "get_sleep": "Retrieve sleep analysis data for a specified date range",
    "get_active_energy": "Retrieve active energy burned data for a specified date range",
    "get_health_summary": (
        "Retrieve a comprehensive health summary including steps, heart rate, "
        "sleep, and active energy for a specified date range"
    ),
}

Handler = Callable[[TimeWindow], Awaitable[str]]


class ToolDispatcher:
    """Routes tool invocations to metric queries and renders the result"""

    def __init__(
        self,
        queries: MetricQueryService,
        aggregator: Optional[SummaryAggregator] = None,
    ):
        self.queries = queries
        self.aggregator = aggregator or SummaryAggregator(queries)
        self._handlers: Dict[str, Handler] = {
            "get_steps": self._get_steps,
            "get_heart_rate": self._get_heart_rate,
            "get_sleep": self._get_sleep,
            "get_active_energy": self._get_active_energy,
            "get_health_summary": self._get_health_summary,
        }

    @classmethod
    def from_provider(cls, provider: HealthDataProvider) -> "ToolDispatcher":
        return cls(MetricQueryService(provider))

    @property
    def tool_names(self) -> List[str]:
        return list(self._handlers)

    async def handle(self, invocation: ToolInvocation) -> ToolResult:
        return await self.dispatch(invocation.operation, invocation.arguments)

    async def dispatch(
        self, operation: str, arguments: Optional[Mapping[str, Any]] = None
    ) -> ToolResult:
        """Run one tool call; never raises"""
        arguments = arguments or {}
        logger.info(
            f"MCP Tool Call: {operation}(start_date={arguments.get('start_date')}, "
            f"end_date={arguments.get('end_date')})"
        )
        start = time.time()
        try:
            window = parse_date_range(arguments.get("start_date"), arguments.get("end_date"))

            handler = self._handlers.get(operation)
            if handler is None:
                raise UnknownOperationError(operation)

            text = await handler(window)
            duration_ms = int((time.time() - start) * 1000)
            logger.info(f"{operation}: {len(text)} chars, {duration_ms}ms")
            return ToolResult(text=text, is_error=False)
        except HealthKitError as e:
            logger.warning(f"{operation} failed: {e}")
            return ToolResult(text=f"Error: {e}", is_error=True)
        except Exception as e:
            logger.error(f"{operation} error: {e}", exc_info=True)
            return ToolResult(text=f"Error: {e}", is_error=True)

    async def _get_steps(self, window: TimeWindow) -> str:
        return render_cumulative(await self.queries.query_steps(window))

    async def _get_heart_rate(self, window: TimeWindow) -> str:
        return render_heart_rate(await self.queries.query_heart_rate_samples(window))

    async def _get_sleep(self, window: TimeWindow) -> str:
        return render_sleep(await self.queries.query_sleep_samples(window))

    async def _get_active_energy(self, window: TimeWindow) -> str:
        return render_cumulative(await self.queries.query_active_energy(window))

    async def _get_health_summary(self, window: TimeWindow) -> str:
        return render_combined(await self.aggregator.get_summary(window))
