from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

class CustomModel(BaseModel):
    """
    Common base for every pydantic schema in the project.
    Keeps the API data policy in one place: camelCase on the wire,
    snake_case in Python, ORM objects accepted directly.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        # Accept snake_case field names as well as the camelCase aliases.
        populate_by_name=True,

        # Allow building schemas straight from SQLAlchemy model instances.
        from_attributes=True,

        extra="forbid",
    )

    @field_serializer('*', check_fields=False)
    def serialize_datetime(self, value, _info):
        """Render datetimes as ISO-8601 in UTC. Naive values are assumed to be UTC already."""
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            else:
                value = value.astimezone(timezone.utc)
            return value.isoformat()
        return value
