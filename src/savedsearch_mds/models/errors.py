class SavedSearchNotFound(Exception):
	def __init__(self, message: str, searchId: str):
		self.searchId = searchId
		self.message = message

		super().__init__(self.message)


class MalformedFilterDocument(Exception):
	def __init__(self, message: str, searchId: str, detail: str = ""):
		self.searchId = searchId
		self.message = message
		self.detail = detail

		super().__init__(self.message)


class UserNotAuthorized(Exception):
	def __init__(
			self,
			message: str,
			searchId: str,
			userId: str,
			action: str
		):
		self.message = message
		self.searchId = searchId
		self.userId = userId
		self.action = action
		super().__init__(self.message)
