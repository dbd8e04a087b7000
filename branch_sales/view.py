import logging
from typing import Awaitable, Callable, Optional

from . import settings
from .data_handler import LoadFailure, load_branches
from .formatting import Collator, NumberFormatter
from .pipelines import revenue
from .schemas import AggregatedProduct, BranchDataset, TableRow, TableView

logger = logging.getLogger(__name__)

IDLE = "idle"
LOADING = "loading"
READY = "ready"
FAILED = "failed"

Loader = Callable[[], Awaitable[dict[str, Optional[BranchDataset]]]]


class ViewState:
    """
    Holds the loaded branch data and the current search query, and derives
    the table shown to the presenter.

    Lifecycle: idle -> loading -> ready | failed. Loading happens once;
    a failure is recorded in `error` and never re-raised.
    """

    def __init__(
        self,
        collator: Optional[Collator] = None,
        formatter: Optional[NumberFormatter] = None,
        loader: Optional[Loader] = None,
    ):
        self.collator = collator or Collator()
        self.formatter = formatter or NumberFormatter.for_locale(settings.NUMBER_LOCALE)
        self._loader = loader or load_branches

        self.datasets: dict[str, Optional[BranchDataset]] = self._empty_datasets()
        self.loading = False
        self.error: Optional[str] = None
        self.query = ""
        self.status = IDLE

    @staticmethod
    def _empty_datasets() -> dict[str, Optional[BranchDataset]]:
        return {branch: None for branch in settings.BRANCH_SOURCES}

    async def load(self) -> None:
        if self.status != IDLE:
            raise RuntimeError(f"Branch data is loaded once; view is already {self.status}.")

        self.status = LOADING
        self.loading = True
        try:
            self.datasets = await self._loader()
            self.status = READY
            logger.info("✅ Branch data loaded.")
        except LoadFailure as e:
            self.datasets = self._empty_datasets()
            self.error = str(e)
            self.status = FAILED
            logger.error(f"❌ Loading failed: {self.error}")
        finally:
            self.loading = False

    def set_query(self, text: str) -> None:
        self.query = text or ""

    def displayed_products(self) -> list[AggregatedProduct]:
        """Recomputed in full on every call: aggregate, filter, then sort."""
        if self.status != READY:
            return []
        products = revenue.aggregate(self.datasets)
        matches = revenue.filter_products(products, self.query)
        return revenue.sort_products(matches, self.collator)

    def render(self) -> TableView:
        if self.loading:
            return TableView(loading=True)
        if self.error is not None:
            return TableView(error=self.error)
        if self.status != READY:
            return TableView()

        products = self.displayed_products()
        rows = [
            TableRow(name=p.name, formatted_revenue=self.formatter.format(p.revenue))
            for p in products
        ]
        return TableView(
            rows=rows,
            total=self.formatter.format(revenue.total_revenue(products)),
            empty=not rows,
        )
