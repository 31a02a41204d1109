"""MCP tool surface: queries, aggregation, formatting, dispatch and server"""
from .dispatcher import ToolDispatcher, TOOL_DESCRIPTIONS
from .queries import MetricQueryService
from .summary import SummaryAggregator
