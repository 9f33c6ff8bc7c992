"""metricline: record named metric values and replay how they evolved.

The public surface is re-exported here so callers can write::

    from metricline import MetricStore, trim, infer, extract_numbers, rate
"""

from __future__ import annotations

from metricline.core.rate import Sample, rate
from metricline.core.report import dump_md_table
from metricline.core.store.memory import MetricStore
from metricline.core.store.snapshot import Snapshot
from metricline.core.timeline import Inference, extract_numbers, infer, trim
from metricline.core.values import as_number

__all__ = [
    "__version__",
    "Inference",
    "MetricStore",
    "Sample",
    "Snapshot",
    "as_number",
    "dump_md_table",
    "extract_numbers",
    "infer",
    "rate",
    "trim",
]
__version__ = "0.1.0"
