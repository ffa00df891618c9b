#!/usr/bin/env python3
"""
Demo: build an order from plain data and render it back.

Shows the assembled schema, JSON and YAML renderings, and the error
reported for an invalid nested item.
"""

import json

from typedmodel import MaterializationError
from typedmodel.examples import Order, build_example_order


def main():
    print("=" * 80)
    print("ASSEMBLED SCHEMA (Order)")
    print("=" * 80)
    print(json.dumps(Order.get_schema(), indent=2, default=lambda cls: cls.__name__))

    order = build_example_order(item_count=3)

    print("\n" + "=" * 80)
    print("MATERIALIZED")
    print("=" * 80)
    print(repr(order))

    print("\nJSON:")
    print("-" * 80)
    print(order.as_json(indent=2))

    print("\nYAML:")
    print("-" * 80)
    print(order.as_yaml())

    print("=" * 80)
    print("INVALID NESTED ITEM")
    print("=" * 80)
    try:
        Order({"id": 1, "items": [{"price": 1}, {"price": "x"}]})
    except MaterializationError as e:
        print(f"Failed at {e.location}: {e.message}")


if __name__ == "__main__":
    main()
