"""Inventory service: product CRUD over a document store."""
