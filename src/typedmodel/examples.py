"""
Example model family: a small order book.

Shows nested models, arrays of models, date formats, defaults, read-only
fields, inheritance and a self-referencing model. Used by the demo script
and the tests.
"""
from typedmodel.model import TypedModel


class Customer(TypedModel):
    props = {
        "name": {"type": "string"},
        "email": {"type": "string"},
        "since": {"type": "string", "format": "date"},
    }
    schema = {"required": ["name"]}


class VipCustomer(Customer):
    props = {
        "tier": {"type": "string", "enum": ["gold", "platinum"], "default": "gold"},
    }


class Item(TypedModel):
    props = {
        "sku": {"type": "string"},
        "quantity": {"type": "integer", "minimum": 1, "default": 1},
        "price": {"type": "number"},
    }
    schema = {"required": ["price"]}


class Order(TypedModel):
    props = {
        "id": {"type": "integer"},
        "placed": {"type": "string", "format": "date"},
        "updated": {"type": "string", "format": "date-time"},
        "customer": {"type": Customer},
        "items": {"type": "array", "items": {"type": Item}, "default": []},
        "status": {"type": "string", "default": "new"},
        "total": {"type": "number", "readOnly": True},
    }
    schema = {"required": ["id"]}


class TreeNode(TypedModel):
    props = {
        "label": {"type": "string"},
        "children": {"type": "array", "items": {"$ref": "#"}},
    }


def build_example_order(item_count: int = 2) -> Order:
    items = [
        {"sku": f"SKU-{i}", "quantity": i, "price": 10.0 * i}
        for i in range(1, item_count + 1)
    ]
    return Order({
        "id": 1001,
        "placed": "2021-06-15",
        "updated": "2021-06-15T10:30:00+00:00",
        "customer": {"name": "Ada Lovelace", "since": "2019-01-02"},
        "items": items,
    })
