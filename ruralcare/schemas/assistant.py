from pydantic import BaseModel


class InterpretResponse(BaseModel):
    answer: str
