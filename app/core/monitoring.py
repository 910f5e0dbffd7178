"""
Health check utilities
"""

import os
import time
from datetime import datetime
from typing import Dict, Any

import psutil
from pydantic import BaseModel, ConfigDict

from app.core.config import settings


class SystemHealth(BaseModel):
    """System health status model"""

    status: str
    timestamp: datetime
    uptime: float
    memory_usage: Dict[str, Any]
    search_configured: bool
    allowed_domains: list[str]

    model_config = ConfigDict()


class HealthChecker:
    """Process health with relay configuration state"""

    def __init__(self):
        self.start_time = time.time()

    def get_memory_info(self) -> Dict[str, Any]:
        """Get memory usage of this process and the host"""
        process = psutil.Process(os.getpid())
        virtual = psutil.virtual_memory()
        return {
            "rss": process.memory_info().rss,
            "system_available": virtual.available,
            "system_percentage": virtual.percent,
        }

    def get_system_health(self) -> SystemHealth:
        uptime = time.time() - self.start_time
        memory = self.get_memory_info()

        status = "healthy"
        if memory["system_percentage"] > 90:
            status = "unhealthy"
        elif not settings.search_configured or memory["system_percentage"] > 80:
            status = "warning"

        return SystemHealth(
            status=status,
            timestamp=datetime.now(),
            uptime=uptime,
            memory_usage=memory,
            search_configured=settings.search_configured,
            allowed_domains=list(settings.allowed_domains),
        )


# Global health checker instance
health_checker = HealthChecker()
