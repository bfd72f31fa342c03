"""
Chart Backend Interface

A chart backend turns a declarative ChartConfig into a live widget and
hands back an opaque handle. The state store owns every handle and asks
the backend to release it before a replacement is stored, so each chart
name has at most one live widget.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChartName(str, Enum):
    """Fixed chart slots on the dashboard."""
    MONTHLY_OVERVIEW = "monthlyOverview"
    BUDGET = "budget"
    PROGRESS = "progress"
    ASSET_DISTRIBUTION = "assetDistribution"


class ChartKind(str, Enum):
    DOUGHNUT = "doughnut"
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    PLACEHOLDER = "placeholder"


class ChartSeries(BaseModel):
    """One dataset of a chart."""

    model_config = ConfigDict(frozen=True)

    label: str = ""
    values: tuple[float, ...] = ()
    colors: tuple[str, ...] = ()
    fill: bool = False


class ChartConfig(BaseModel):
    """
    Declarative description of one chart.

    A PLACEHOLDER chart has no series and shows `message` instead.
    """

    model_config = ConfigDict(frozen=True)

    name: ChartName
    kind: ChartKind
    labels: tuple[str, ...] = ()
    series: tuple[ChartSeries, ...] = ()
    message: Optional[str] = None
    currency_symbol: str = "Rs"
    dark_mode: bool = False
    compact: bool = Field(default=False, description="Narrow viewport layout")

    @property
    def is_placeholder(self) -> bool:
        return self.kind == ChartKind.PLACEHOLDER


class ChartBackend(ABC):
    """
    Abstract chart rendering capability.

    Handles are opaque to the rest of the client.
    """

    @abstractmethod
    def render(self, config: ChartConfig) -> Any:
        """
        Build a live chart.

        Args:
            config: What to draw

        Returns:
            Opaque handle for the drawn chart
        """
        pass

    @abstractmethod
    def release(self, handle: Any) -> None:
        """
        Tear down a chart built by `render`.

        Releasing a handle twice must be harmless.
        """
        pass
