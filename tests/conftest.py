import copy
import datetime
import uuid

import jwt
import pytest
from fastapi.testclient import TestClient

from savedsearch_mds.core.config import appConfig
from savedsearch_mds.deps import getSearchStore
from savedsearch_mds.main import app
from savedsearch_mds.models.search import SavedSearch
from savedsearch_mds.models.user import UserModel


class InMemorySearchStore():
	""" Dictionary backed store with the same async interface as MongoSearchStore
	"""

	def __init__(self, users=None, projects=None, savedSearches=None):
		self.users = {user.id: user for user in (users or [])}
		self.projects = list(projects or [])
		self.savedSearches = {search.id: search for search in (savedSearches or [])}
		self.projectReads = 0
		self.userReads = 0

	async def getSavedSearchById(self, searchId):
		return self.savedSearches.get(searchId)

	async def getSavedSearches(self, principalId=None):
		return [
			search for search in self.savedSearches.values()
			if principalId is None or search.createdBy == principalId
		]

	async def createSavedSearch(self, draft):
		now = datetime.datetime.now(datetime.timezone.utc)
		savedSearch = SavedSearch.model_validate({
			**draft,
			"id": str(uuid.uuid4()),
			"createdAt": now,
			"updatedAt": now
		})
		self.savedSearches[savedSearch.id] = savedSearch
		return savedSearch

	async def updateSavedSearch(self, searchId, partial):
		foundSearch = self.savedSearches.get(searchId)
		if foundSearch is None:
			return None
		updatedSearch = SavedSearch.model_validate({
			**foundSearch.model_dump(),
			**partial,
			"updatedAt": datetime.datetime.now(datetime.timezone.utc)
		})
		self.savedSearches[searchId] = updatedSearch
		return updatedSearch

	async def deleteSavedSearch(self, searchId):
		self.savedSearches.pop(searchId, None)

	async def getProjects(self):
		self.projectReads += 1
		return copy.deepcopy(self.projects)

	async def getUser(self, userId):
		self.userReads += 1
		return self.users.get(userId)


def makeProject(projectId, status="active", **fields):
	project = {
		"id": projectId,
		"name": f"Project {projectId}",
		"description": f"Description of {projectId}",
		"status": status,
		"ownerId": "u-alice",
		"teamSize": "3",
		"dueDate": None,
		"createdAt": "2024-01-10T09:00:00",
		"updatedAt": "2024-06-01T12:00:00",
	}
	project.update(fields)
	return project


def makeSavedSearch(searchId, createdBy="u-alice", visibility="private", filters="{}", name=None):
	now = datetime.datetime(2024, 6, 1, 12, 0, 0)
	return SavedSearch.model_validate({
		"id": searchId,
		"name": name or f"Search {searchId}",
		"createdBy": createdBy,
		"filters": filters,
		"visibility": visibility,
		"createdAt": now,
		"updatedAt": now
	})


def makeToken(userId):
	return jwt.encode({"sub": userId}, appConfig.jwtSecret, algorithm="HS256")


def authHeaders(userId):
	return {"Authorization": f"Bearer {makeToken(userId)}"}


@pytest.fixture
def users():
	return [
		UserModel(id="u-alice", username="alice", role="user"),
		UserModel(id="u-bob", username="bob", role="user"),
		UserModel(id="u-vera", username="vera", role="viewer"),
		UserModel(id="u-root", username="root", role="admin"),
		UserModel(id="u-gone", username="gone", role="user", isActive=False),
	]


@pytest.fixture
def projects():
	return [
		makeProject("p1", status="active", ownerId="u-alice"),
		makeProject("p2", status="active", ownerId="u-bob"),
		makeProject("p3", status="active", ownerId="u-alice", dueDate="2024-06-15T10:00:00"),
		makeProject("p4", status="planning", ownerId="u-bob"),
		makeProject("p5", status="planning", ownerId="u-ghost"),
	]


@pytest.fixture
def store(users, projects):
	return InMemorySearchStore(users=users, projects=projects)


@pytest.fixture
def client(store):
	app.dependency_overrides[getSearchStore] = lambda: store
	yield TestClient(app)
	app.dependency_overrides.clear()
