"""
Base classes for records persisted in the key-value store.

Records are JSON documents with camelCase keys and an explicit
``schemaVersion``. Unknown keys are ignored on load so that a newer
writer never breaks an older reader.
"""

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from farmbot.core.errors import RecordDecodeError

SCHEMA_VERSION = 1


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Record(CamelModel):
    schema_version: int = SCHEMA_VERSION

    def dump(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def load(cls, raw: str, key: str = ""):
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise RecordDecodeError(key, str(e)) from e
