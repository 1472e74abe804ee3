from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CurrentUser(BaseModel):
    """Principal decoded from the bearer token.

    Carries identity only. Roles are never read from the token; authorization
    goes through the role table on every request.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: UUID
    email: str
