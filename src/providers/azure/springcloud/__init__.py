"""Azure Spring Apps services, apps and deployments."""

from .kinds import SPRING_APPS, SPRING_DEPLOYMENTS, SPRING_SERVICES, stage_active_deployment
from .manager import SpringCloudResourceManager

__all__ = [
    "SPRING_SERVICES",
    "SPRING_APPS",
    "SPRING_DEPLOYMENTS",
    "SpringCloudResourceManager",
    "stage_active_deployment",
]
