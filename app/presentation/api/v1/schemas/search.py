from typing import List

from pydantic import BaseModel


class SearchPinsResponse(BaseModel):
    images: List[str]
    bookmark: str = ""
    query: str = ""
    csrftoken: str = ""
