from typing import Dict


# user facing filter field -> project record attribute
FIELD_ATTRIBUTE_MAP: Dict[str, str] = {
	"created_by": "ownerId",
	"project_manager": "projectManagerId",
	"last_modified": "updatedAt",
	"started": "startDate",
	"completed": "completedAt",
	"due_date": "dueDate",
	"team_size": "teamSize",
	"created_date": "createdAt",
}

# fields holding a user id, displayed as the user's username
USER_FIELDS = frozenset(["created_by", "project_manager"])


def mapField(field: str) -> str:
	""" Record attribute name for a filter field, unmapped fields are used verbatim
	"""
	return FIELD_ATTRIBUTE_MAP.get(field, field)


def isUserField(field: str) -> bool:
	return field in USER_FIELDS
