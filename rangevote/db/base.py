"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here so metadata.create_all() sees every table
from rangevote.db.models.user import User  # noqa: F401, E402
from rangevote.db.models.organization import Organization, OrganizationMember  # noqa: F401, E402
from rangevote.db.models.ballot import Ballot  # noqa: F401, E402
from rangevote.db.models.candidate import Candidate  # noqa: F401, E402
from rangevote.db.models.vote import Vote  # noqa: F401, E402
from rangevote.db.models.ballot_permission import BallotPermission  # noqa: F401, E402
from rangevote.db.models.share_link import ShareLink  # noqa: F401, E402
