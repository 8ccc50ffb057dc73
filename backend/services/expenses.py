from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List

from core.converters import in_month
from schemas.expenses import Expense, ExpenseSummary

ALL_DEPARTMENTS = "Todos"


def normalize_department(name: str) -> str:
    # "oficina" and "Oficina" must land in the same bucket
    name = (name or "").strip()
    return name[:1].upper() + name[1:]


def known_departments(expenses: Iterable[Expense]) -> List[str]:
    return sorted({e.department for e in expenses if e.department})


def filter_expenses(expenses: Iterable[Expense], month: str, department: str = ALL_DEPARTMENTS) -> List[Expense]:
    return [
        e for e in expenses
        if in_month(e.expense_date, month)
        and (department == ALL_DEPARTMENTS or e.department == department)
    ]


def totals_by_department(expenses: Iterable[Expense]) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for e in expenses:
        totals[e.department] += e.amount
    return dict(totals)


def expense_summary(expenses: Iterable[Expense], month: str, department: str = ALL_DEPARTMENTS) -> ExpenseSummary:
    all_items = list(expenses)
    selected = filter_expenses(all_items, month, department)
    by_department = totals_by_department(selected)
    return ExpenseSummary(
        month=month,
        department=department,
        total=sum((e.amount for e in selected), Decimal("0")),
        by_department=by_department,
        departments=known_departments(all_items),
        # floor of 1 keeps chart bars finite when the month is empty
        largest_department_total=max([Decimal("1"), *by_department.values()]),
        expenses=sorted(selected, key=lambda e: (e.expense_date, e.id)),
    )
