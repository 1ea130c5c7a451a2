"""Tag catalog — fixed reference data attached to reviews.

Tags are immutable once seeded. The order of ``TAG_CATALOG`` is the catalog
order used wherever tag keys need a stable tie-break.
"""

from enum import Enum

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from experiences.domain import experiences

logger = structlog.get_logger(__name__)


class TagCategory(Enum):
    PROCESS = "PROCESS"
    QUALITY = "QUALITY"
    BEHAVIOR = "BEHAVIOR"


# (key, label, category)
TAG_CATALOG = (
    ("GHOST_JOB", "Ghost job", TagCategory.PROCESS),
    ("PROMPT_FEEDBACK", "Prompt feedback", TagCategory.PROCESS),
    ("NO_FEEDBACK", "No feedback", TagCategory.PROCESS),
    ("UNREASONABLE_DIFFICULTY", "Unreasonable difficulty", TagCategory.QUALITY),
    ("DISRESPECTFUL", "Disrespectful", TagCategory.BEHAVIOR),
    ("WELL_ORGANIZED", "Well organized", TagCategory.QUALITY),
    ("MISALIGNED_ROLE", "Misaligned role", TagCategory.QUALITY),
    ("LONG_PROCESS", "Long process", TagCategory.PROCESS),
)

CATALOG_ORDER = {key: position for position, (key, _, _) in enumerate(TAG_CATALOG)}


@experiences.aggregate
class Tag:
    key = String(identifier=True, max_length=50)
    label = String(required=True, max_length=100)
    category = String(choices=TagCategory, required=True)


def seed_tag_catalog() -> int:
    """Load the fixed catalog, skipping tags that already exist.

    Returns the number of tags created.
    """
    repo = current_domain.repository_for(Tag)
    created = 0
    for key, label, category in TAG_CATALOG:
        try:
            repo.get(key)
        except ObjectNotFoundError:
            repo.add(Tag(key=key, label=label, category=category.value))
            created += 1

    if created:
        logger.info("Seeded tag catalog", created=created)
    return created


def resolve_tag_keys(tag_keys) -> list[str]:
    """Validate tag keys against the catalog.

    Returns the keys de-duplicated in submission order. Unknown keys are an
    argument error, not a missing record.
    """
    repo = current_domain.repository_for(Tag)
    resolved = []
    for key in tag_keys or []:
        if key in resolved:
            continue
        try:
            repo.get(key)
        except ObjectNotFoundError:
            raise ValidationError({"tag_keys": [f"Unknown tag key: {key}"]})
        resolved.append(key)
    return resolved
