from savedsearch_mds.models.search import SavedSearch, VisibilityEnum
from savedsearch_mds.models.user import UserModel, READ_ONLY_ROLE, isAdmin
from typing import List


def isVisibleTo(savedSearch: SavedSearch, principal: UserModel) -> bool:
	""" Per record visibility of a saved search for a principal

	private and shared searches are visible to their creator and administrators only,
	shared is reserved for an explicit share list that does not exist yet
	"""
	if savedSearch.createdBy == principal.id:
		return True

	if isAdmin(principal):
		return True

	match savedSearch.visibility:
		case VisibilityEnum.PUBLIC:
			return True
		case VisibilityEnum.TEAM:
			return principal.role != READ_ONLY_ROLE
		case VisibilityEnum.SHARED:
			# no share list yet, behaves as private
			return False
		case VisibilityEnum.PRIVATE:
			return False


def visibleTo(allSearches: List[SavedSearch], principal: UserModel) -> List[SavedSearch]:
	return [search for search in allSearches if isVisibleTo(search, principal)]


def canModify(savedSearch: SavedSearch, principal: UserModel) -> bool:
	""" Only the creator or an administrator may update or delete a saved search
	"""
	return savedSearch.createdBy == principal.id or isAdmin(principal)
