"""API route modules."""

from gasstock.api.routes.categories import router as categories_router
from gasstock.api.routes.category_movements import router as category_movements_router
from gasstock.api.routes.cylinder_movements import router as cylinder_movements_router
from gasstock.api.routes.cylinder_types import router as cylinder_types_router
from gasstock.api.routes.cylinders import router as cylinders_router
from gasstock.api.routes.health import router as health_router

__all__ = [
    "health_router",
    "categories_router",
    "category_movements_router",
    "cylinder_types_router",
    "cylinders_router",
    "cylinder_movements_router",
]
