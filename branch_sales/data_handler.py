import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import requests
from pydantic import ValidationError

from . import settings
from .schemas import BranchDataset

logger = logging.getLogger(__name__)


class LoadFailure(Exception):
    """Raised when any branch document cannot be fetched or decoded."""

    def __init__(self, message: str, branch: Optional[str] = None):
        super().__init__(message)
        self.branch = branch


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def build_source_registry(
    base: str = settings.DATA_SOURCE_BASE,
    sources: dict[str, str] = settings.BRANCH_SOURCES,
) -> list[dict[str, str]]:
    """
    Resolves every branch document against the data base location.
    The result is the single list the loader iterates over.
    """
    registry = []
    for branch, document in sources.items():
        if _is_url(base):
            location = f"{base.rstrip('/')}/{document}"
        else:
            location = str(Path(base) / document)
        registry.append({"branch": branch, "location": location})
    return registry


def _read_document(location: str, timeout: Optional[float]):
    if _is_url(location):
        response = requests.get(location, timeout=timeout)
        response.raise_for_status()
        return response.json()

    with open(location, encoding="utf-8") as f:
        return json.load(f)


def fetch_branch(
    location: str, timeout: Optional[float] = settings.REQUEST_TIMEOUT
) -> BranchDataset | None:
    """
    Fetches and decodes one branch document.
    A document that decodes to `null` is an absent dataset, not an error.
    """
    payload = _read_document(location, timeout)
    if payload is None:
        return None
    return BranchDataset.model_validate(payload)


def _fetch_source(source: dict[str, str], timeout: Optional[float]) -> BranchDataset | None:
    branch = source["branch"]
    logger.info(f"  > Fetching {branch} from {source['location']}")
    try:
        dataset = fetch_branch(source["location"], timeout)
    except (requests.exceptions.RequestException, OSError, ValueError, ValidationError) as e:
        logger.error(f"❌ Could not load {branch}: {e}")
        raise LoadFailure(str(e), branch=branch) from e

    count = len(dataset.products) if dataset is not None else 0
    logger.info(f"  > ✅ {branch}: {count} products")
    return dataset


async def load_branches(
    sources: Optional[list[dict[str, str]]] = None,
    timeout: Optional[float] = settings.REQUEST_TIMEOUT,
) -> dict[str, BranchDataset | None]:
    """
    Fetches every branch concurrently and waits for all of them.
    Any single failure fails the whole load with that error's message;
    whatever the other branches returned is discarded.
    """
    if sources is None:
        sources = build_source_registry()

    logger.info(f"--- Loading {len(sources)} branch sources ---")
    results = await asyncio.gather(
        *(asyncio.to_thread(_fetch_source, source, timeout) for source in sources)
    )
    return {source["branch"]: dataset for source, dataset in zip(sources, results)}
