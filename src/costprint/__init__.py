"""CostPrint: print-shop job costing and quoting dashboard."""

__version__ = "0.1.0"
