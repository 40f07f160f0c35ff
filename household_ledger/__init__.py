"""Top-level package for the household ledger engine.

The engine is pure computation over in-memory ledger snapshots. The
primary modules are:

* ``models`` – frozen records, enums and the JSON boundary converters
* ``recurrence`` – expansion of recurring budget plans into dated entries
* ``allocation`` – nature and budget-partition classification
* ``budget_calculations`` – budget-versus-actual statistics per period
* ``analytics`` – impulse indicators, spending breakdowns, calendar markers
* ``amortization`` / ``assets`` – loan payments and net worth
* ``ledger`` – snapshot operations (add, edit, confirm, assets)
* ``storage`` – JSON store and backup files

A monthly report can be printed from the command line:

```bash
python scripts/budget_report.py --month 2024-03
```
"""

from . import allocation  # noqa: F401  # re-exported for convenience
from . import amortization  # noqa: F401
from . import analytics  # noqa: F401
from . import budget_calculations  # noqa: F401
from . import ledger  # noqa: F401
from . import recurrence  # noqa: F401
from . import storage  # noqa: F401
from .models import LedgerState, Transaction, TransactionDraft  # noqa: F401

__all__ = [
    "allocation",
    "amortization",
    "analytics",
    "budget_calculations",
    "ledger",
    "recurrence",
    "storage",
    "LedgerState",
    "Transaction",
    "TransactionDraft",
]
