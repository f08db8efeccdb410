from changelog_api.models.status import StatusDefinition
from changelog_api.models.status_mapping import StatusCategoryMapping
from changelog_api.models.event import Event
from changelog_api.models.workflow_lock import StatusWorkflowLock
