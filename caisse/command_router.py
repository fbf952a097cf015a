# caisse/command_router.py
"""
Name-based command surface used by the UI layer.

Each command takes a plain mapping of parameters and produces plain data
(dicts, lists, bools, None). `invoke` never raises for domain errors; it
reports them as an error string plus a machine-readable kind.
"""
from __future__ import annotations

import logging
import platform
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Callable, Dict

from pydantic import BaseModel, ValidationError

from . import catalog, dashboard
from .errors import NotFound, PosError, ValidationFailure
from .ordering import checkout
from .schemas import AppVersion, CategoryIn, OrderIn, ProductIn, ProductUpdate
from .store import Store

logger = logging.getLogger(__name__)

Handler = Callable[[Store, Dict[str, Any]], Any]

_OS_NAMES = {"darwin": "macos"}


def _payload(params: Dict[str, Any], model: type[BaseModel]) -> Any:
    raw = params.get("payload")
    if raw is None:
        raise ValidationFailure("Missing payload")
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise ValidationFailure(f"Invalid payload: {e}") from e


def _id_param(params: Dict[str, Any], key: str) -> str:
    raw = params.get(key)
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationFailure(f"Missing {key}")
    return raw


def get_app_version() -> AppVersion:
    try:
        v = version("caisse")
    except PackageNotFoundError:
        v = "0.0.0"
    system = platform.system().lower()
    return AppVersion(version=v, os=_OS_NAMES.get(system, system), arch=platform.machine())


COMMANDS: Dict[str, Handler] = {
    "list_categories": lambda store, params: catalog.list_categories(store),
    "create_category": lambda store, params: catalog.create_category(store, _payload(params, CategoryIn)),
    "update_category": lambda store, params: catalog.update_category(store, _payload(params, CategoryIn)),
    "delete_category": lambda store, params: catalog.delete_category(store, _id_param(params, "category_id")),
    "list_products": lambda store, params: catalog.list_products(store),
    "create_product": lambda store, params: catalog.create_product(store, _payload(params, ProductIn)),
    "update_product": lambda store, params: catalog.update_product(store, _payload(params, ProductUpdate)),
    "toggle_product_availability": lambda store, params: catalog.toggle_product_availability(
        store, _id_param(params, "product_id")
    ),
    "delete_product": lambda store, params: catalog.delete_product(store, _id_param(params, "product_id")),
    "create_order": lambda store, params: checkout.create_order(store, _payload(params, OrderIn)),
    "list_orders": lambda store, params: checkout.list_orders(store),
    "get_dashboard_summary": lambda store, params: dashboard.get_dashboard_summary(store),
    "reset_database": lambda store, params: store.reset(),
    "get_app_version": lambda store, params: get_app_version(),
}


def to_plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [to_plain(v) for v in value]
    return value


def run_command(store: Store, command: str, params: Dict[str, Any] | None = None) -> Any:
    """Dispatch `command` and return its plain-data result. Domain errors propagate as PosError."""
    handler = COMMANDS.get((command or "").strip())
    if handler is None:
        raise NotFound(f"Unknown command: {command}")
    return to_plain(handler(store, params or {}))


def invoke(store: Store, command: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
    try:
        return {"ok": True, "data": run_command(store, command, params)}
    except PosError as e:
        logger.info("Command %s failed (%s): %s", command, e.kind, e)
        return {"ok": False, "error": str(e), "kind": e.kind}
