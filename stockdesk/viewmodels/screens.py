# Rev 1.0.0

"""Presets for the product, inventory and audit list screens."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Type

from PySide6.QtCore import QObject

from stockdesk.api.client import ApiClient, RemoteListSource
from stockdesk.config import ClientSettings
from stockdesk.models.filter_spec import AuditFilters, FilterSpec, InventoryFilters, ProductFilters
from stockdesk.models.list_records import AuditLogRecord, InventoryEntryRecord, ProductRecord
from stockdesk.viewmodels.list_screen_viewmodel import ListScreenViewModel
from stockdesk.viewmodels.page_fetch import ListSource


@dataclass(frozen=True)
class ScreenConfig:
    name: str
    endpoint: str
    filters_cls: Type[FilterSpec]
    parse_item: Callable[[Mapping[str, Any]], Any]
    scroll_threshold_px: int
    end_margin_px: int = 200


PRODUCTS = ScreenConfig(
    name="products",
    endpoint="products/search",
    filters_cls=ProductFilters,
    parse_item=ProductRecord.from_row,
    scroll_threshold_px=300,
)
INVENTORY = ScreenConfig(
    name="inventory",
    endpoint="inventory",
    filters_cls=InventoryFilters,
    parse_item=InventoryEntryRecord.from_row,
    scroll_threshold_px=200,
)
AUDIT = ScreenConfig(
    name="audit",
    endpoint="audit-logs",
    filters_cls=AuditFilters,
    parse_item=AuditLogRecord.from_row,
    scroll_threshold_px=120,
)

SCREENS: Dict[str, ScreenConfig] = {config.name: config for config in (PRODUCTS, INVENTORY, AUDIT)}


def remote_source(config: ScreenConfig, client: ApiClient) -> RemoteListSource:
    return RemoteListSource(client, config.endpoint, parse_item=config.parse_item)


def build_screen(
    config: ScreenConfig,
    source: ListSource,
    *,
    settings: Optional[ClientSettings] = None,
    dispatcher: Any = None,
    parent: Optional[QObject] = None,
) -> ListScreenViewModel:
    settings = settings or ClientSettings()
    return ListScreenViewModel(
        source,
        config.filters_cls,
        limit=settings.page_limit,
        debounce_ms=settings.debounce_ms,
        dispatcher=dispatcher,
        scroll_threshold_px=config.scroll_threshold_px,
        end_margin_px=config.end_margin_px,
        parent=parent,
    )


def products_screen(source: ListSource, **kwargs: Any) -> ListScreenViewModel:
    return build_screen(PRODUCTS, source, **kwargs)


def inventory_screen(source: ListSource, **kwargs: Any) -> ListScreenViewModel:
    return build_screen(INVENTORY, source, **kwargs)


def audit_screen(source: ListSource, **kwargs: Any) -> ListScreenViewModel:
    return build_screen(AUDIT, source, **kwargs)
