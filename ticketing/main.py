import logging
import coloredlogs
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from ticketing.config import settings
from ticketing.exception_handler import AppError, app_error_handler, custom_exception_handler
from ticketing.api.routes import api_router
from ticketing.utils.logging.otel_config import setup_telemetry
from ticketing.utils.logging.logging_config import setup_logging


load_dotenv()

app = FastAPI(title="Ticketing Sync")
app.include_router(api_router, prefix="/api")
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(Exception, custom_exception_handler)
origins = ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


if settings.ALLOW_OTEL_COLLECTOR.lower() == "true":
    setup_logging()
    setup_telemetry(app)


logger = logging.getLogger(__name__)
log_format = "%(asctime)s : %(levelname).4s - %(message)s - [%(name)s]"
coloredlogs.install(level=settings.LOG_LEVEL.lower(), isatty=True, fmt=log_format,
                    level_styles={
                        'debug': {'color': 'white', 'bold': True},
                        'info': {'color': 'green', 'bold': True},
                        'error': {'color': 'red', 'bold': True},
                        'warning': {'color': 'yellow', 'bold': True},
                        'critical': {'color': 'red', 'bold': True}})


@app.get("/")
def read_root():
    return {
        "message": "Welcome",
        "description": "Offline ticket sync API.",
        "environment": settings.ENVIRONMENT,
        "documentation": "For API documentation, visit /docs.",
    }
