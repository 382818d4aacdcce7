"""
Health checks and monitoring with Prometheus metrics
"""
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi.responses import Response
import time
import psutil
import structlog

from speaknotes.services.notes_generator import generate_notes

logger = structlog.get_logger()

# Prometheus metrics
REQUEST_COUNT = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
REQUEST_DURATION = Histogram('http_request_duration_seconds', 'HTTP request duration', ['method', 'endpoint'])
NOTES_GENERATION_REQUESTS = Counter('notes_generation_requests_total', 'Total notes generation requests', ['status'])
NOTES_SENTENCES = Histogram(
    'notes_input_sentences', 'Sentences found per processed lecture',
    buckets=(0, 1, 5, 10, 25, 50, 100, 250, 500, 1000),
)

SELF_CHECK_TEXT = (
    "Photosynthesis is the process by which plants convert light into energy. "
    "This is an important topic for exams."
)


class HealthChecker:
    def __init__(self):
        self.start_time = time.time()

    def check_pipeline(self) -> dict:
        """Run the notes pipeline on a fixed sample and verify the output shape"""
        try:
            notes = generate_notes(SELF_CHECK_TEXT)
            if notes.raw_sentence_count == 2 and notes.definitions:
                return {
                    "status": "healthy",
                    "message": "Notes pipeline produced expected output",
                }
            return {
                "status": "unhealthy",
                "message": "Notes pipeline produced unexpected output",
            }
        except Exception as e:
            logger.error("pipeline_health_check_failed", error=str(e))
            return {
                "status": "unhealthy",
                "message": f"Notes pipeline failed: {str(e)}",
            }

    def get_system_metrics(self) -> dict:
        """Get system resource metrics"""
        try:
            memory = psutil.virtual_memory()
            return {
                "cpu_percent": psutil.cpu_percent(interval=None),
                "memory_percent": memory.percent,
                "memory_available_gb": round(memory.available / (1024**3), 2),
                "uptime_seconds": time.time() - self.start_time,
            }
        except Exception as e:
            logger.error("system_metrics_failed", error=str(e))
            return {"error": str(e)}

    def get_health_status(self) -> dict:
        """Get overall health status"""
        checks = {"pipeline": self.check_pipeline()}
        unhealthy_checks = [name for name, check in checks.items() if check["status"] == "unhealthy"]

        return {
            "status": "healthy" if not unhealthy_checks else "unhealthy",
            "timestamp": time.time(),
            "checks": checks,
            "system_metrics": self.get_system_metrics(),
            "unhealthy_components": unhealthy_checks,
        }


def get_metrics():
    """Get Prometheus metrics"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
