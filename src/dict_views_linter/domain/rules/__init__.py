"""Detection rules."""

from dict_views_linter.domain.rules.dict_views import (
    DictViewDetector,
    LambdaShape,
    TransformInvocation,
)

__all__ = ["DictViewDetector", "LambdaShape", "TransformInvocation"]
