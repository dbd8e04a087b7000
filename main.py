import asyncio

import pandas as pd

from branch_sales import settings
from branch_sales.formatting import Collator, NumberFormatter
from branch_sales.logger import setup_logger
from branch_sales.schemas import TableView
from branch_sales.view import READY, ViewState


def render_table(view: TableView) -> str:
    """Text rendering of one table view, used by the console loop below."""
    if view.loading:
        return "Loading..."
    if view.error is not None:
        return f"Error: {view.error}"

    if view.empty:
        body = [{"Product": "No products found.", "Revenue": "N/A"}]
    else:
        body = [{"Product": r.name, "Revenue": r.formatted_revenue} for r in view.rows]
    body.append({"Product": "Total", "Revenue": view.total})

    df = pd.DataFrame(body, columns=["Product", "Revenue"])
    return df.to_string(index=False)


def run_view():
    """Loads all branches once, then re-renders the table for every search typed."""
    logger = setup_logger()
    logger.info("--- Our Products ---")

    state = ViewState(
        collator=Collator(),
        formatter=NumberFormatter.for_locale(settings.NUMBER_LOCALE),
    )
    print(render_table(TableView(loading=True)))
    asyncio.run(state.load())
    print(render_table(state.render()))
    if state.status != READY:
        return

    while True:
        try:
            query = input("\nSearch Products (Ctrl-D to quit): ")
        except EOFError:
            break
        state.set_query(query)
        print(render_table(state.render()))


if __name__ == "__main__":
    run_view()
