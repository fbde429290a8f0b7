from savedsearch_mds.crud.store import SearchStore


class SearchServerRequest():
	def __init__(
			self,
			store: SearchStore
	):
		self.store = store
