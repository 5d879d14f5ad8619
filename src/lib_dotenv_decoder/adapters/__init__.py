"""Adapters translating outside sources into flat key/value mappings."""
