from typing import Literal, Union

from pydantic import BaseModel

from models.country import Country

GENERIC_ERROR_MESSAGE = "Failed to fetch countries. Please try again later."


class Loading(BaseModel):
    model_config = {"frozen": True}

    kind: Literal["loading"] = "loading"


class Error(BaseModel):
    model_config = {"frozen": True}

    kind: Literal["error"] = "error"
    message: str = GENERIC_ERROR_MESSAGE


class Loaded(BaseModel):
    model_config = {"frozen": True}

    kind: Literal["loaded"] = "loaded"
    countries: tuple[Country, ...] = ()


ViewState = Union[Loading, Error, Loaded]


def is_terminal(state: ViewState) -> bool:
    return not isinstance(state, Loading)
