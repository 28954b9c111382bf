# oauth_store/adapters/outbound/persistence/models/base_model.py

from typing import Any, Dict

from sqlalchemy.orm import declarative_base

# Parent of every ORM model, holds the metadata used by create_all
Base = declarative_base()


def as_dict(obj) -> Dict[str, Any]:
    """Column values of an ORM instance, the record shape the stores return."""
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}
