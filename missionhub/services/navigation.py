# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Admin sidebar menus, built as data for the UI to render.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel

from missionhub.core.i18n import Translator, humanize, pluralize, singularize, titleize

REMOVE_CONFIRMATION = "Are you sure you want to remove this %(object_name)s?"


class MenuItem(BaseModel):
    label: str
    href: str
    method: str = "get"
    confirm: Optional[str] = None


class SidebarBuilder:
    """Collection and object sidebars for admin resources.

    ``parent`` is an optional ``(resource, id)`` pair for nested resources,
    e.g. ``("missions", 3)`` for a mission's participations.
    """

    def __init__(self, translator: Translator, base_path: str = "/admin") -> None:
        self._t = translator
        self._base = base_path.rstrip("/")

    def resource_name(self, resource: str, controller_path: Optional[str] = None) -> str:
        default = humanize(singularize(resource))
        key = (controller_path or f"admin/{resource}").replace("/", ".")
        return titleize(self._t.t(key, scope="sidebar", default=default))

    def collection_sidebar(self, resource: str, parent: Optional[Tuple[str, int]] = None,
                           controller_path: Optional[str] = None) -> List[MenuItem]:
        name = self.resource_name(resource, controller_path)
        return self._parent_links(parent) + self._collection_links(resource, name, parent)

    def object_sidebar(self, resource: str, resource_id: int,
                       parent: Optional[Tuple[str, int]] = None,
                       controller_path: Optional[str] = None) -> List[MenuItem]:
        name = self.resource_name(resource, controller_path)
        url = self._resource_url(resource, resource_id, parent)
        return (
            self._parent_links(parent)
            + self._collection_links(resource, name, parent)
            + [
                MenuItem(label=f"View {name}", href=url),
                MenuItem(label=f"Edit {name}", href=f"{url}/edit"),
                MenuItem(label=f"Remove {name}", href=url, method="delete",
                         confirm=self._remove_confirmation(name)),
            ]
        )

    def individual_resource_links(self, resource: str, resource_id: int,
                                  parent: Optional[Tuple[str, int]] = None) -> List[MenuItem]:
        url = self._resource_url(resource, resource_id, parent)
        name = self.resource_name(resource)
        return [
            MenuItem(label="View", href=url),
            MenuItem(label="Edit", href=f"{url}/edit"),
            MenuItem(label="Remove", href=url, method="delete",
                     confirm=self._remove_confirmation(name)),
        ]

    # ── Internal ──

    def _parent_links(self, parent: Optional[Tuple[str, int]]) -> List[MenuItem]:
        if not parent:
            return []
        parent_resource, parent_id = parent
        parent_name = self.resource_name(parent_resource)
        url = f"{self._base}/{parent_resource}/{parent_id}"
        return [
            MenuItem(label=f"View {parent_name}", href=url),
            MenuItem(label=f"Edit {parent_name}", href=f"{url}/edit"),
        ]

    def _collection_links(self, resource: str, name: str,
                          parent: Optional[Tuple[str, int]]) -> List[MenuItem]:
        url = self._collection_url(resource, parent)
        return [
            MenuItem(label=f"All {pluralize(name)}", href=url),
            MenuItem(label=f"Add {name}", href=f"{url}/new"),
        ]

    def _collection_url(self, resource: str, parent: Optional[Tuple[str, int]]) -> str:
        if parent:
            return f"{self._base}/{parent[0]}/{parent[1]}/{resource}"
        return f"{self._base}/{resource}"

    def _resource_url(self, resource: str, resource_id: int,
                      parent: Optional[Tuple[str, int]]) -> str:
        return f"{self._collection_url(resource, parent)}/{resource_id}"

    def _remove_confirmation(self, name: str) -> str:
        return self._t.t("confirmation.remove", scope="sidebar",
                         default=REMOVE_CONFIRMATION, object_name=name)
