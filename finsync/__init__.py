"""Top‑level package for FinSync, a personal finance tracker.

This file makes the directory a Python package and exposes
convenient names.  The primary modules are:

* ``db`` – the SQLite record store for transactions, categories and goals
* ``filters`` – period and attribute filtering of the transaction table
* ``analytics`` – summaries and per-category spending
* ``goals`` and ``alerts`` – goal progress and limit/trend alerts
* ``visualization`` – functions that generate Plotly figures
* ``dashboard`` – the Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run finsync/Home.py
```

or ``python run_dashboard.py`` from the project root.
"""

from . import alerts  # noqa: F401  # re-exported for convenience
from . import analytics  # noqa: F401  # re-exported for convenience
from . import db  # noqa: F401  # re-exported for convenience
from . import filters  # noqa: F401  # re-exported for convenience
from . import goals  # noqa: F401  # re-exported for convenience
from . import models  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience

__version__ = "0.1.0"

__all__ = ["alerts", "analytics", "db", "filters", "goals", "models", "visualization"]
