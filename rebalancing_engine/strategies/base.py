"""Abstract base class for rebalancing strategies."""

import dataclasses
from abc import ABC, abstractmethod
from datetime import timedelta
from decimal import Decimal
from typing import Any, ClassVar, Mapping, Optional

from ..allocation import to_decimal
from ..config import StrategyKey
from ..exceptions import ConfigurationError
from ..models import AnalysisResult, StrategyInfo

# Accepted range for each tunable parameter, inclusive
PARAMETER_RANGES: dict[str, tuple[Decimal, Decimal]] = {
    "threshold_percent": (Decimal("1"), Decimal("50")),
    "review_interval_days": (Decimal("1"), Decimal("1825")),
}


class RebalanceStrategy(ABC):
    """Decides whether a portfolio should be rebalanced.

    Subclasses are frozen dataclasses; their fields are the tunable trigger
    parameters and are echoed back in recommendations.
    """

    key: ClassVar[StrategyKey]
    info: ClassVar[StrategyInfo]
    review_interval_days: int

    @abstractmethod
    def should_rebalance(
        self,
        analysis: AnalysisResult,
        elapsed: Optional[timedelta] = None,
    ) -> bool:
        """Evaluate the trigger.

        Args:
            analysis: Drift analysis of the portfolio.
            elapsed: Time since the last rebalance, when known.

        Returns:
            True if rebalancing should happen now.
        """
        pass

    @property
    def name(self) -> str:
        return self.key.value

    @property
    def parameters(self) -> dict[str, Any]:
        return dataclasses.asdict(self)  # type: ignore[call-overload]

    def validate_configuration(self, configuration: Mapping[str, object]) -> bool:
        """Check parameter overrides against the accepted names and ranges."""
        allowed = {f.name for f in dataclasses.fields(self)}  # type: ignore[arg-type]
        for param, raw in configuration.items():
            if param not in allowed:
                return False
            try:
                value = to_decimal(raw, param)
            except ConfigurationError:
                return False
            low, high = PARAMETER_RANGES[param]
            if not low <= value <= high:
                return False
            if param == "review_interval_days" and value != value.to_integral_value():
                return False
        return True

    def with_parameters(self, **overrides: object) -> "RebalanceStrategy":
        """Return a copy with the given parameters overridden.

        Raises:
            ConfigurationError: If a parameter is unknown or out of range.
        """
        if not overrides:
            return self
        if not self.validate_configuration(overrides):
            raise ConfigurationError(
                f"Invalid parameters for {self.name}: {overrides}. "
                f"Accepted: {', '.join(self.parameters)}"
            )

        converted: dict[str, Any] = {}
        for param, raw in overrides.items():
            value = to_decimal(raw, param)
            converted[param] = int(value) if param == "review_interval_days" else value
        return dataclasses.replace(self, **converted)  # type: ignore[type-var]
