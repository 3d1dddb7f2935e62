"""Pydantic base for persisted clinic records."""

from pydantic import BaseModel, ConfigDict


class RecordModel(BaseModel):
    """Base class for all record and request models.

    Stored JSON and API payloads use the front end's camelCase field names;
    Python code uses the snake_case attribute names.
    """

    model_config = ConfigDict(populate_by_name=True)
