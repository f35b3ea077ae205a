import importlib

from resale_ledger.models.product import Product
from resale_ledger.models.store import Store


def import_all_models() -> None:
    for module_name in (
        "resale_ledger.models.product",
        "resale_ledger.models.store",
    ):
        importlib.import_module(module_name)


__all__ = ["Product", "Store", "import_all_models"]
