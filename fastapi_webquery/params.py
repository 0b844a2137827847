# fastapi_webquery/params.py

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from fastapi import Request


@runtime_checkable
class ParamSource(Protocol):
	"""Anything that hands out raw request values by key.

	An absent key and an empty value are the same thing: ``""``.
	"""

	def query(self, key: str) -> str: ...


class MappingParams:
	def __init__(self, values: Mapping[str, Any]):
		self.values = values

	def query(self, key: str) -> str:
		if hasattr(self.values, "getlist"):
			value = self.values.getlist(key)
		else:
			value = self.values.get(key)
		if isinstance(value, (list, tuple)):
			value = value[0] if value else None
		if value is None:
			return ""
		return str(value)


class RequestParams(MappingParams):
	"""Reads the query string of a FastAPI / Starlette request."""

	def __init__(self, request: Request):
		super().__init__(request.query_params)


def as_param_source(params: ParamSource | Mapping[str, Any]) -> ParamSource:
	if isinstance(params, Mapping):
		return MappingParams(params)
	if isinstance(params, ParamSource):
		return params
	raise TypeError(f"Unsupported parameter source: {type(params).__name__}")
