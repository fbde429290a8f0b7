import pytest

from savedsearch_mds.crud.visibility import visibleTo, isVisibleTo, canModify
from savedsearch_mds.models.user import UserModel, PermissionEnum, hasPermission, isAdmin

from conftest import makeSavedSearch


@pytest.fixture
def searches():
	return [
		makeSavedSearch("S1", createdBy="A", visibility="private"),
		makeSavedSearch("S2", createdBy="A", visibility="team"),
		makeSavedSearch("S3", createdBy="A", visibility="public"),
		makeSavedSearch("S4", createdBy="A", visibility="shared"),
	]


def visibleIds(searches, principal):
	return {search.id for search in visibleTo(searches, principal)}


def test_user_sees_team_and_public(searches):
	principal = UserModel(id="B", username="b", role="user")
	assert visibleIds(searches, principal) == {"S2", "S3"}


def test_viewer_sees_public_only(searches):
	principal = UserModel(id="B", username="b", role="viewer")
	assert visibleIds(searches, principal) == {"S3"}


@pytest.mark.parametrize("role", ["admin", "user", "viewer"])
def test_creator_sees_all_of_their_searches(searches, role):
	principal = UserModel(id="A", username="a", role=role)
	assert visibleIds(searches, principal) == {"S1", "S2", "S3", "S4"}


def test_admin_sees_everything(searches):
	principal = UserModel(id="C", username="c", role="admin")
	assert visibleIds(searches, principal) == {"S1", "S2", "S3", "S4"}


def test_shared_behaves_as_private_for_other_users(searches):
	shared = searches[3]
	assert not isVisibleTo(shared, UserModel(id="B", username="b", role="user"))
	assert not isVisibleTo(shared, UserModel(id="B", username="b", role="viewer"))


def test_legacy_search_without_visibility_is_public():
	legacy = makeSavedSearch("S5", createdBy="A", visibility=None)
	assert isVisibleTo(legacy, UserModel(id="B", username="b", role="viewer"))


def test_visibility_keeps_input_order(searches):
	principal = UserModel(id="A", username="a", role="user")
	assert [search.id for search in visibleTo(searches, principal)] == ["S1", "S2", "S3", "S4"]


def test_only_creator_or_admin_can_modify(searches):
	search = searches[2]
	assert canModify(search, UserModel(id="A", username="a", role="viewer"))
	assert canModify(search, UserModel(id="C", username="c", role="admin"))
	assert not canModify(search, UserModel(id="B", username="b", role="user"))


def test_role_permissions():
	admin = UserModel(id="C", username="c", role="admin")
	viewer = UserModel(id="V", username="v", role="viewer")
	inactive = UserModel(id="I", username="i", role="admin", isActive=False)

	assert isAdmin(admin)
	assert not isAdmin(viewer)
	assert hasPermission(admin, PermissionEnum.MANAGE_USERS)
	assert hasPermission(viewer, PermissionEnum.VIEW_REPORTS)
	assert not hasPermission(viewer, PermissionEnum.CREATE_PROJECTS)
	assert not hasPermission(inactive, PermissionEnum.VIEW_REPORTS)
	assert not hasPermission(None, PermissionEnum.VIEW_REPORTS)
