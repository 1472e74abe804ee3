import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# JSONB on PostgreSQL, plain JSON elsewhere (sqlite test databases)
JSONType = sa.JSON().with_variant(JSONB(), "postgresql")
