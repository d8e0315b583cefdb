"""ghlabel.

Reconciles the issue labels of a GitHub repository with a YAML template:
- labels missing from the repository are created
- labels whose color drifted are updated
- labels not in the template are deleted
"""

__version__ = "0.1.0"

from ghlabel.labels import Label
from ghlabel.sync.engine import compute_plan
from ghlabel.sync.executor import execute
from ghlabel.sync.plan import Action, ActionKind, ActionPlan

__all__ = [
    "__version__",
    "Action",
    "ActionKind",
    "ActionPlan",
    "Label",
    "compute_plan",
    "execute",
]
