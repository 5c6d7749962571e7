"""
ORM models for the entities the task-board core reads and writes.

Importing this package ensures model classes are registered with the Base
metadata.
"""

from .company import (  # noqa: F401
    Company,
    Member,
    MemberType,
)
from .workspace import (  # noqa: F401
    Workspace,
    Sheet,
)
from .task import (  # noqa: F401
    Task,
    task_members,
)
from .select import (  # noqa: F401
    Select,
    Option,
)
