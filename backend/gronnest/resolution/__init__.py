from .resolver import ProductResolver
from .merge import RECONCILIATION_TABLE, merge_products
from .fanout import gather_settled, run_source

__all__ = [
    "ProductResolver",
    "RECONCILIATION_TABLE",
    "merge_products",
    "gather_settled",
    "run_source",
]
