from cms_admin.models.menu import CmsMenu
from cms_admin.models.page import CmsPage

__all__ = ["CmsMenu", "CmsPage"]
