from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime


class CamelModel(BaseModel):
	"""Boundary shape: camelCase on the wire, snake_case attributes and columns."""
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TimestampModel(CamelModel):
	created_at: datetime
	updated_at: datetime
