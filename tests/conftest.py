import json

import pytest

from branch_sales.formatting import Collator, NumberFormatter


@pytest.fixture
def branch_documents():
    return {
        "branch1": {
            "products": [
                {"name": "Widget", "unitPrice": 10, "sold": 3},
                {"name": "Gadget", "unitPrice": 2.5, "sold": 4},
            ]
        },
        "branch2": {
            "products": [
                {"name": "Widget", "unitPrice": 5, "sold": 2},
                {"name": "Éclair", "unitPrice": 1, "sold": 7},
            ]
        },
        "branch3": {"products": [{"name": "apple", "unitPrice": 1000, "sold": 2}]},
    }


@pytest.fixture
def branch_files(tmp_path, branch_documents):
    """Writes each branch document to disk and returns the loader registry."""
    sources = []
    for branch, document in branch_documents.items():
        path = tmp_path / f"{branch}.json"
        path.write_text(json.dumps(document), encoding="utf-8")
        sources.append({"branch": branch, "location": str(path)})
    return sources


@pytest.fixture(scope="session")
def collator():
    return Collator()


@pytest.fixture
def formatter():
    return NumberFormatter.for_locale("en")
