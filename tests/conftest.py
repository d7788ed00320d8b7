"""Common utilities for tests."""

from typing import Any, Optional

from mockfirestore import CollectionReference, Query
from mockfirestore.document import DocumentReference


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter and get_all."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    # Referencing a missing document leaves an empty entry behind; a real
    # array_contains query skips documents without the field.
    if hasattr(Query, "_compare_func") and not hasattr(Query, "_orig_compare_func"):
        Query._orig_compare_func = Query._compare_func

        def compare_func(self: Any, op: str) -> Any:
            compare = self._orig_compare_func(op)
            if op == "array_contains":
                return lambda x, y: x is not None and compare(x, y)
            return compare

        Query._compare_func = compare_func

    def doc_ref_eq(self: Any, other: Any) -> bool:
        if not isinstance(other, DocumentReference):
            return False
        return self._path == other._path

    if not hasattr(DocumentReference, "_orig_eq"):
        DocumentReference._orig_eq = DocumentReference.__eq__
        DocumentReference.__eq__ = doc_ref_eq

    # get_all collects references into a set.
    if not hasattr(DocumentReference, "_patched_hash"):
        DocumentReference.__hash__ = lambda self: hash(tuple(self._path))
        DocumentReference._patched_hash = True
