"""Result type shared by the Star Hunt engines.

Engines never raise for domain failures (unknown ids, insufficient points,
validation errors). They return an ActionResult and the coordinator decides
how to surface it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..type_defs import AppData


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an engine operation.

    Attributes:
        data: Snapshot after the operation. The input object itself when
              nothing changed.
        success: False when the operation was rejected.
        reason: One of the const.REASON_* codes, or None for a plain success.
                Successful no-ops also carry a reason (e.g. already completed).
        shortfall: Points still missing for insufficient_points rejections.
        bonus_awarded: Bonus points granted by this operation (0 if none).
        errors: Field-level validation errors {field: translation_key}.
        created_id: Id of an entity created by the operation, if any.
    """

    data: AppData
    success: bool = True
    reason: str | None = None
    shortfall: int = 0
    bonus_awarded: int = 0
    errors: dict[str, str] = field(default_factory=dict)
    created_id: str | None = None

    @classmethod
    def rejected(
        cls, data: AppData, reason: str, **kwargs: Any
    ) -> ActionResult:
        """Build a failed result that leaves data untouched."""
        return cls(data=data, success=False, reason=reason, **kwargs)
