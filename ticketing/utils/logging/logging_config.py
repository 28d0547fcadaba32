import logging
import sys

from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.system_metrics import SystemMetricsInstrumentor
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource

from ticketing.config import settings
from ticketing.models.session import engine

logger = logging.getLogger(__name__)


def setup_logging():
    """Ships log records to the OTLP collector alongside the console output."""
    try:
        SystemMetricsInstrumentor().instrument()
        SQLAlchemyInstrumentor().instrument(engine=engine)

        resource = Resource(attributes={SERVICE_NAME: settings.SERVICE_NAME})
        log_exporter = OTLPLogExporter(
            endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
            insecure=settings.OTEL_COLLECTOR_ALLOW_INSECURE.lower() == "true",
        )
        log_provider = LoggerProvider(resource=resource)
        set_logger_provider(log_provider)
        log_provider.add_log_record_processor(BatchLogRecordProcessor(log_exporter))

        log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
        otel_handler = LoggingHandler(level=log_level, logger_provider=log_provider)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(levelname)s - %(message)s - %(name)s - %(funcName)s"
        ))

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        root_logger.addHandler(otel_handler)
        root_logger.addHandler(console_handler)
    except Exception as e:
        # telemetry is optional; the service keeps running with console logs only
        logger.error(f"OpenTelemetry log export not configured: {str(e)}")
