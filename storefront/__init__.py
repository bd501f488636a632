"""Storefront cart: line items, totals, snapshot persistence and checkout."""
