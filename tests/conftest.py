import pytest

from pyramid.models import Node


@pytest.fixture
def root():
    """Main message with two key arguments, each backed by one piece of evidence."""
    return Node(
        id="root",
        level=0,
        label="Main Message",
        content="Adopt mobile-first strategy",
        children=[
            Node(
                id="arg-1",
                level=1,
                label="Key Argument 1",
                content="Users have moved to mobile",
                children=[
                    Node(id="evidence-1-1", level=2, label="Evidence", content="68% of users are mobile-first"),
                ],
            ),
            Node(
                id="arg-2",
                level=1,
                label="Key Argument 2",
                content="Competitors are ahead on mobile",
                children=[
                    Node(id="evidence-2-1", level=2, label="Evidence", content="12% decline in the 25-34 demographic"),
                ],
            ),
        ],
    )


@pytest.fixture
def pyramid_json():
    return {
        "title": "Q4 Product Strategy Recommendation",
        "pyramid": {
            "id": "root",
            "level": 0,
            "label": "Main Message",
            "content": "Adopt mobile-first strategy",
            "children": [
                {
                    "id": "arg-1",
                    "level": 1,
                    "label": "Key Argument 1",
                    "content": "Users have moved to mobile",
                    "children": [
                        {"id": "evidence-1-1", "level": 2, "label": "Evidence",
                         "content": "68% of users are mobile-first", "children": []},
                    ],
                },
                {
                    "id": "arg-2",
                    "level": 1,
                    "label": "Key Argument 2",
                    "content": "Competitors are ahead on mobile",
                    "children": [],
                },
            ],
        },
    }
