from .api import ItemStore, make_store

__all__ = ["ItemStore", "make_store"]
