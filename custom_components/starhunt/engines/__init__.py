"""Engine modules for Star Hunt integration.

Contains pure computation engines:
- reset_engine: Time-based auto-reset and manual resets
- activity_engine: Task completion, purchases, bonus and point adjustments
- merge_engine: Combining snapshots from two devices
- household_engine: Parent-mode administration
"""

from .action_result import ActionResult
from .activity_engine import ActivityEngine
from .household_engine import HouseholdEngine
from .merge_engine import MergeEngine
from .reset_engine import ResetEngine

__all__ = [
    "ActionResult",
    "ActivityEngine",
    "HouseholdEngine",
    "MergeEngine",
    "ResetEngine",
]
