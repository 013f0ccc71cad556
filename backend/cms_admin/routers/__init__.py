# API Routers
from cms_admin.routers import menus

__all__ = ['menus']
