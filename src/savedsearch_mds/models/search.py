from pydantic import (
	BaseModel,
	ConfigDict,
	Field,
	ValidationError,
	field_validator,
	model_validator
)
from typing import Optional, List, Dict, Any, Union
from enum import Enum
import datetime
import json


class VisibilityEnum(str, Enum):
	PRIVATE = "private"
	TEAM = "team"
	SHARED = "shared"
	PUBLIC = "public"

	def __repr__(self):
		return self.value


class EntityTypeEnum(str, Enum):
	PROJECT = "project"
	TASK = "task"
	FILE = "file"
	ATTRIBUTE = "attribute"


class OperatorEnum(str, Enum):
	# text
	CONTAINS = "contains"
	NOT_CONTAINS = "not_contains"
	EQUALS = "equals"
	NOT_EQUALS = "not_equals"
	STARTS_WITH = "starts_with"
	ENDS_WITH = "ends_with"
	# user and status
	IS = "is"
	IS_NOT = "is_not"
	# date
	ON = "on"
	BEFORE = "before"
	AFTER = "after"
	BETWEEN = "between"
	# number
	GREATER_THAN = "greater_than"
	LESS_THAN = "less_than"
	# any field type
	IS_EMPTY = "is_empty"
	IS_NOT_EMPTY = "is_not_empty"


def parseOperator(operator: str) -> Optional[OperatorEnum]:
	""" Map a stored operator string onto the enumerated operators, None when the operator is unknown
	"""
	try:
		return OperatorEnum(operator.strip().lower())
	except (ValueError, AttributeError):
		return None


class FilterClause(BaseModel):
	model_config = ConfigDict(extra="ignore")

	id: Optional[str] = Field(default=None)
	field: str
	operator: str
	value: str = Field(default="")
	smartValue: Optional[str] = Field(default=None)
	visible: bool = Field(default=False)

	@field_validator("value", mode="before")
	@classmethod
	def coerceValue(cls, value):
		if value is None:
			return ""
		if isinstance(value, bool):
			return str(value).lower()
		if isinstance(value, (int, float)):
			return str(value)
		return value

	@field_validator("smartValue", mode="before")
	@classmethod
	def blankSmartValue(cls, value):
		# the client clears a smart value by sending an empty string
		if isinstance(value, str) and value.strip() == "":
			return None
		return value

	def comparisonValue(self) -> str:
		""" The value the resolver receives, a smart value takes precedence over the literal
		"""
		if self.smartValue is not None:
			return self.smartValue
		return self.value


# document key for each entity type's filter group
FILTER_GROUP_KEYS: Dict[EntityTypeEnum, str] = {
	EntityTypeEnum.PROJECT: "projectFilters",
	EntityTypeEnum.TASK: "taskFilters",
	EntityTypeEnum.FILE: "fileFilters",
	EntityTypeEnum.ATTRIBUTE: "attributeFilters",
}


class FilterDocument(BaseModel):
	""" Serialized filter groups of a saved search keyed by entity type
	"""
	model_config = ConfigDict(extra="ignore")

	projectFilters: Optional[List[FilterClause]] = Field(default=None)
	taskFilters: Optional[List[FilterClause]] = Field(default=None)
	fileFilters: Optional[List[FilterClause]] = Field(default=None)
	attributeFilters: Optional[List[FilterClause]] = Field(default=None)

	def getGroup(self, entityType: EntityTypeEnum) -> List[FilterClause]:
		group = getattr(self, FILTER_GROUP_KEYS[entityType])
		if group is None:
			return []
		return group

	def serialize(self) -> str:
		return self.model_dump_json(exclude_none=True)


def normalizeFilters(filters: Union[str, Dict[str, Any], FilterDocument]) -> str:
	""" Validate filters submitted as a JSON string or object and return the stored JSON string

	Raises ValueError when the document does not match the filter group schema
	"""
	if isinstance(filters, FilterDocument):
		return filters.serialize()

	if isinstance(filters, str):
		try:
			parsed = json.loads(filters)
		except json.JSONDecodeError as e:
			raise ValueError(f"filters is not valid JSON: {e.msg}")
	else:
		parsed = filters

	if not isinstance(parsed, dict):
		raise ValueError("filters must be a JSON object keyed by entity type")

	try:
		return FilterDocument.model_validate(parsed).serialize()
	except ValidationError as e:
		raise ValueError(f"filters do not match the filter group schema: {e.error_count()} errors")


class SavedSearch(BaseModel):
	model_config = ConfigDict(extra="ignore")

	id: str
	name: str
	description: Optional[str] = Field(default=None)
	createdBy: str
	filters: str = Field(default="{}")
	visibility: VisibilityEnum = Field(default=VisibilityEnum.PUBLIC)
	createdAt: datetime.datetime
	updatedAt: datetime.datetime

	@field_validator("visibility", mode="before")
	@classmethod
	def legacyVisibility(cls, value):
		# records saved before visibility existed are public
		if value is None or value == "":
			return VisibilityEnum.PUBLIC
		return value


class SavedSearchCreate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	name: str = Field(..., min_length=1, max_length=200)
	description: Optional[str] = Field(default=None)
	filters: Union[str, Dict[str, Any]] = Field(default="{}")
	visibility: VisibilityEnum = Field(default=VisibilityEnum.PUBLIC)

	@field_validator("name", mode="before")
	@classmethod
	def trimName(cls, value):
		if isinstance(value, str):
			return value.strip()
		return value

	@field_validator("filters")
	@classmethod
	def validateFilters(cls, value):
		return normalizeFilters(value)


class SavedSearchUpdate(BaseModel):
	model_config = ConfigDict(extra="ignore")

	name: Optional[str] = Field(default=None, min_length=1, max_length=200)
	description: Optional[str] = Field(default=None)
	filters: Optional[Union[str, Dict[str, Any]]] = Field(default=None)
	visibility: Optional[VisibilityEnum] = Field(default=None)

	@field_validator("name", mode="before")
	@classmethod
	def trimName(cls, value):
		if isinstance(value, str):
			return value.strip()
		return value

	@field_validator("filters")
	@classmethod
	def validateFilters(cls, value):
		if value is None:
			return None
		return normalizeFilters(value)

	def changes(self) -> Dict[str, Any]:
		return self.model_dump(exclude_none=True, mode="json")


class DateRange(BaseModel):
	""" Inclusive instant range produced by date smart values
	"""
	start: datetime.datetime
	end: datetime.datetime

	@model_validator(mode="after")
	def checkOrder(self):
		if self.end < self.start:
			raise ValueError("range end precedes range start")
		return self

	def contains(self, instant: datetime.datetime) -> bool:
		return self.start <= instant <= self.end


ResolvedValue = Union[DateRange, str]


class SearchResult(BaseModel):
	type: EntityTypeEnum
	id: str
	name: str
	description: Optional[str] = Field(default=None)
	metadata: Dict[str, Any] = Field(default_factory=dict)
