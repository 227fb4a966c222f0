from typing import Any, Dict, Tuple, Type
from sqlalchemy.orm import Session


def upsert(db: Session, model: Type, key: Dict[str, Any], values: Dict[str, Any]) -> Tuple[Any, bool]:
    """
    Insert-or-update a row identified by its natural key.

    Reads the row matching ``key``; if absent a new row is added, otherwise
    only the columns whose value differs are written. Returns
    ``(row, changed)`` where ``changed`` is False when the stored row
    already held every value, so re-running with the same input is a no-op.
    """
    row = db.query(model).filter_by(**key).first()
    if row is None:
        row = model(**key, **values)
        db.add(row)
        return row, True

    changed = False
    for field, value in values.items():
        if getattr(row, field) != value:
            setattr(row, field, value)
            changed = True
    return row, changed
