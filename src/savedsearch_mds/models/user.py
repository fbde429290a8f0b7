from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, List
from enum import Enum


class RoleEnum(str, Enum):
	ADMIN = "admin"
	USER = "user"
	VIEWER = "viewer"

	def __repr__(self):
		return self.value


class PermissionEnum(str, Enum):
	MANAGE_USERS = "manage_users"
	MANAGE_FORMS = "manage_forms"
	MANAGE_WORKFLOWS = "manage_workflows"
	CREATE_PROJECTS = "create_projects"
	EDIT_OWN_PROJECTS = "edit_own_projects"
	EDIT_ALL_PROJECTS = "edit_all_projects"
	DELETE_OWN_PROJECTS = "delete_own_projects"
	DELETE_ALL_PROJECTS = "delete_all_projects"
	VIEW_PROJECTS = "view_projects"
	VIEW_REPORTS = "view_reports"


ROLE_PERMISSIONS: Dict[RoleEnum, List[PermissionEnum]] = {
	RoleEnum.ADMIN: list(PermissionEnum),
	RoleEnum.USER: [
		PermissionEnum.CREATE_PROJECTS,
		PermissionEnum.EDIT_OWN_PROJECTS,
		PermissionEnum.DELETE_OWN_PROJECTS,
		PermissionEnum.VIEW_PROJECTS,
		PermissionEnum.VIEW_REPORTS,
	],
	RoleEnum.VIEWER: [
		PermissionEnum.VIEW_PROJECTS,
		PermissionEnum.VIEW_REPORTS,
	],
}

# lowest privilege read only role
READ_ONLY_ROLE = RoleEnum.VIEWER


class UserModel(BaseModel):
	""" Authenticated principal as stored in the user collection, credentials are never loaded
	"""
	model_config = ConfigDict(extra="ignore")

	id: str
	username: str
	role: RoleEnum = Field(default=RoleEnum.USER)
	isActive: bool = Field(default=True)
	createdAt: Optional[str] = Field(default=None)


def isAdmin(user: Optional[UserModel]) -> bool:
	return user is not None and user.role == RoleEnum.ADMIN


def hasPermission(user: Optional[UserModel], permission: PermissionEnum) -> bool:
	if user is None or not user.isActive:
		return False

	return permission in ROLE_PERMISSIONS.get(user.role, [])
