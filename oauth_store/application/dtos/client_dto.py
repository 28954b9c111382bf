# oauth_store/application/dtos/client_dto.py

"""
Schemas for pre-defined OAuth client descriptors.

Descriptors are read from configuration and provisioned into the store
when it connects. Unknown keys are accepted in the configuration but are
left out of the record handed to the store, which persists only the
declared fields.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ClientDescriptor(BaseModel):
    """
    Configuration-declared OAuth client.

    The plaintext ``secret`` field is accepted here only so that it can be
    reported and rejected when the store is provisioned; ``hashed_secret``
    is the field to use.
    """
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Client id, hex encoded")
    hashed_secret: Optional[str] = Field(None, description="sha256 of the client secret, hex encoded")
    secret: Optional[str] = Field(None, description="Forbidden plaintext secret")
    name: str = Field(..., description="Display name")
    image_uri: str = Field("", description="Logo shown on the permissions screen")
    redirect_uri: str = Field(..., description="Registered redirect URI")
    whitelisted: bool = Field(False, description="Skips the permissions prompt")
    can_grant: bool = Field(False, description="May request tokens directly")
    trusted: bool = Field(False, description="First-party client")

    def to_record(self) -> Dict[str, Any]:
        """
        Plain dict form used by the reconciler.

        Only declared fields are included, without unset optional ones. Extra
        keys are never stored, so comparing them would report a change on
        every pass.
        """
        return self.model_dump(include=set(type(self).model_fields), exclude_none=True)
