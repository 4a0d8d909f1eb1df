"""Task creation factory for nltask.

Maps a reconciled ParsedTaskDraft into a TaskRecord: tag and person names are
resolved against repositories (found or created), the date phrase decides the
due-date type and the effort phrase is bucketed.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Union

from nltask.models.constants import PARSE_FAILURE_NOTICE
from nltask.models.draft import ParsedTaskDraft, Priority
from nltask.models.task import DueDateType, Person, Tag, TaskRecord, TaskStatus
from nltask.parser.effort import map_effort_level
from nltask.parser.merge import union_names

logger = logging.getLogger(__name__)

Entity = Union[Tag, Person]


class EntityRepository(Protocol):
    """Lookup/creation of named entities (tags or people)."""

    def find_by_name(self, name: str) -> Optional[Entity]:
        ...

    def create(self, name: str) -> Entity:
        ...


class InMemoryEntityRepository:
    """Case-insensitive in-memory name store."""

    def __init__(self, factory: Callable[..., Entity]):
        self.factory = factory
        self.entities: Dict[str, Entity] = {}

    def find_by_name(self, name: str) -> Optional[Entity]:
        return self.entities.get(name.strip().casefold())

    def create(self, name: str) -> Entity:
        entity = self.factory(id=str(uuid.uuid4()), name=name.strip())
        self.entities[entity.name.casefold()] = entity
        return entity

    def all(self) -> List[Entity]:
        return list(self.entities.values())


def resolve_entities(names: Iterable[str], repository: EntityRepository) -> List[Entity]:
    """Find each named entity, creating the ones that do not exist yet.

    Names are de-duplicated case-insensitively; order is preserved.
    """
    resolved = []
    for name in union_names(n.strip() for n in names if n and n.strip()):
        entity = repository.find_by_name(name)
        if entity is None:
            entity = repository.create(name)
            logger.debug(f"Created entity {entity.id} for {name!r}")
        resolved.append(entity)
    return resolved


def determine_due_date_type(draft: ParsedTaskDraft) -> DueDateType:
    """'due friday' / 'by friday' are deadlines, other dates are scheduled days.

    Args:
        draft: Parsed draft

    Returns:
        DueDateType.NONE without a resolved date, BY for deadline phrasing, ON otherwise
    """
    if draft.due_date is None:
        return DueDateType.NONE
    phrase = (draft.due_date_phrase or "").lower().lstrip()
    if phrase.startswith(("due", "by ")):
        return DueDateType.BY
    return DueDateType.ON


def create_task_from_draft(
    draft: ParsedTaskDraft,
    tags: EntityRepository,
    people: EntityRepository,
    now: Optional[datetime] = None,
) -> TaskRecord:
    """Build the task record for a draft, resolving tags and people.

    Args:
        draft: Reconciled draft
        tags: Tag repository
        people: Person repository
        now: Creation timestamp (default: utcnow)

    Returns:
        TaskRecord with status todo and priority normal unless the draft says otherwise
    """
    return TaskRecord(
        id=str(uuid.uuid4()),
        title=draft.title,
        description=draft.description,
        priority=draft.priority or Priority.NORMAL,
        due_date=draft.due_date,
        due_date_type=determine_due_date_type(draft),
        go_live_date=draft.go_live_date,
        effort_level=map_effort_level(draft.effort_level),
        tags=resolve_entities(draft.tag_names, tags),
        people=resolve_entities(draft.people_names, people),
        status=TaskStatus.TODO,
        created_at=now or datetime.utcnow(),
    )


def user_message_for(draft: Optional[ParsedTaskDraft]) -> Optional[str]:
    """Non-blocking notice for the user, only when there is no usable title."""
    if draft is None or not draft.title.strip():
        return PARSE_FAILURE_NOTICE
    return None
