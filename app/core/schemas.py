from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Request bodies arrive in camelCase; services work with snake_case keys.

    Every field is optional so that missing values reach the service layer,
    which answers with the exact message for each case.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def sent_fields(self) -> Dict[str, Any]:
        """Only the fields present in the request, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)
