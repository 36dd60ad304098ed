from pydantic import BaseModel, model_validator

class PatchModel(BaseModel):
    """Partial update body. Empty strings count as "not provided"."""

    @model_validator(mode="before")
    @classmethod
    def drop_empty_strings(cls, data):
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value != ""}
        return data

    def changes(self) -> dict:
        """Fields the client actually sent, without explicit nulls."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
