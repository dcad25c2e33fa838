from doctrack.web.routers.control_numbers import router as control_numbers_router
from doctrack.web.routers.metadata import router as metadata_router
from doctrack.web.routers.records import router as records_router

__all__ = [
    "control_numbers_router",
    "metadata_router",
    "records_router",
]
