from __future__ import annotations
from typing import Dict, Any

# Snapshot categories: field on TableSnapshot, accepted document keys, and description.
CATEGORY_SCHEMA: Dict[str, Dict[str, Any]] = {
    "revenue":           {"field": "revenue",           "keys": ("revenueRows", "revenue_rows", "revenue"),                               "desc": "Revenue line items"},
    "expense":           {"field": "expense",           "keys": ("expenseRows", "expense_rows", "expense"),                               "desc": "Expense line items"},
    "revenue-deduction": {"field": "revenue_deduction", "keys": ("revenueDeductionRows", "revenue_deduction_rows", "revenue-deduction"), "desc": "Deductions netted against revenue"},
    "lots":              {"field": "lots",              "keys": ("lotsRows", "lots_rows", "lots"),                                        "desc": "Units sold per period"},
    "debt-financing":    {"field": "debt_financing",    "keys": ("debtFinancingRows", "debt_financing_rows", "debt-financing"),           "desc": "Loan balance, draws, interest and repayments"},
}

# Row fields: accepted document keys.
ROW_SCHEMA: Dict[str, Dict[str, Any]] = {
    "id":            {"keys": ("id",),                            "required": True},
    "label":         {"keys": ("label",),                         "required": False},
    "values":        {"keys": ("values",),                        "required": True},
    "total":         {"keys": ("total",),                         "required": False},
    "per_unit":      {"keys": ("perUnit", "per_unit"),            "required": False},
    "is_calculated": {"keys": ("isCalculated", "is_calculated"),  "required": False},
}

PERIOD_KEYS = ("periods", "period")
PERIOD_TYPES = ("monthly", "yearly")

# Composite constraints evaluated in strict mode after rows are parsed.
COMPOSITE_CONSTRAINTS = [
    {
        "name": "unique_row_ids",
        "check": lambda rows: len({r.id for r in rows}) == len(rows),
        "message": "row ids must be unique within a category",
    },
]


def top_level_keys() -> set:
    keys = set(PERIOD_KEYS)
    for entry in CATEGORY_SCHEMA.values():
        keys.update(entry["keys"])
    return keys
