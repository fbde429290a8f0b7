class SearchServerResponse():
	def __init__(
		self,
		success: bool,
		statusCode: int,
		model=None,
		error: dict = None,
		jsonResponse: dict = None
	):
		self.model = model
		self.success = success
		self.statusCode = statusCode
		self.error = error if error is not None else {}
		self.jsonResponse = jsonResponse if jsonResponse is not None else {}
