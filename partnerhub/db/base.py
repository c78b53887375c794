# Import all the models, so that Base has them before being
# imported by create_all() or by the test fixtures
from partnerhub.db.base_class import Base  # noqa: F401
from partnerhub.models import User, Project, Task, Partner  # noqa: F401
