"""Azure Application Insights components."""

from .kinds import APPLICATION_INSIGHTS
from .manager import ApplicationInsightsResourceManager

__all__ = ["APPLICATION_INSIGHTS", "ApplicationInsightsResourceManager"]
