# tokenauth/core/pipeline.py
import inspect
import logging
from typing import Any, Callable, List, Optional

from starlette.responses import Response

from tokenauth.core.context import RequestContext

logger = logging.getLogger(__name__)


class PipelineItem:
    """A step in a pipeline, optionally named so it can be replaced later."""

    def __init__(self, delegate: Callable, name: Optional[str] = None):
        self.delegate = delegate
        self.name = name if name is not None else getattr(delegate, "__name__", None)

    def __repr__(self) -> str:
        return f"PipelineItem(name={self.name!r})"


async def _call(delegate: Callable, *args: Any) -> Any:
    result = delegate(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class _Pipeline:
    def __init__(self):
        self._items: List[PipelineItem] = []

    @property
    def pipeline_items(self) -> List[PipelineItem]:
        return list(self._items)

    @property
    def pipeline_delegates(self) -> List[Callable]:
        return [item.delegate for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def _as_item(self, item) -> PipelineItem:
        return item if isinstance(item, PipelineItem) else PipelineItem(item)

    def _replace(self, item: PipelineItem) -> bool:
        for index, existing in enumerate(self._items):
            if item.name is not None and existing.name == item.name:
                self._items[index] = item
                return True
        return False

    def add_item_to_start_of_pipeline(self, item, replace_in_place: bool = False) -> None:
        self.insert_item_at_pipeline_index(0, item, replace_in_place)

    def add_item_to_end_of_pipeline(self, item, replace_in_place: bool = False) -> None:
        item = self._as_item(item)
        if replace_in_place and self._replace(item):
            return
        self._items.append(item)

    def insert_item_at_pipeline_index(self, index: int, item, replace_in_place: bool = False) -> None:
        """
        Insert `item` at `index`. With `replace_in_place`, an existing item of
        the same name is swapped out where it stands instead.
        """
        item = self._as_item(item)
        if replace_in_place and self._replace(item):
            return
        self._items.insert(index, item)


class BeforePipeline(_Pipeline):
    """Steps run before the handler; the first one to return a response ends the request."""

    async def invoke(self, context: RequestContext) -> Optional[Response]:
        for item in list(self._items):
            response = await _call(item.delegate, context)
            if response is not None:
                logger.debug("before step %s short-circuited the request", item.name)
                return response
        return None


class AfterPipeline(_Pipeline):
    async def invoke(self, context: RequestContext) -> None:
        for item in list(self._items):
            await _call(item.delegate, context)


class ErrorPipeline(_Pipeline):
    """Steps called with (context, exc); the first response returned is used."""

    async def invoke(self, context: RequestContext, exc: BaseException) -> Optional[Response]:
        for item in list(self._items):
            response = await _call(item.delegate, context, exc)
            if response is not None:
                return response
        return None


class Pipelines:
    """Application-wide pipelines, run by PipelineMiddleware."""

    def __init__(self):
        self.before_request = BeforePipeline()
        self.after_request = AfterPipeline()
        self.on_error = ErrorPipeline()
