from pydantic import BaseModel


class Country(BaseModel):
    """A country record as served by the remote endpoint."""

    model_config = {"extra": "ignore", "frozen": True}

    name: str
    flag: str

    @property
    def flag_alt(self) -> str:
        return f"{self.name} flag"
