from pydantic import BaseModel, Field, field_validator


class _ContentRequest(BaseModel):
    content: str = Field(min_length=1, max_length=500000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("content must not be blank")
        return value


class GuideRequest(_ContentRequest):
    pass


class InfographicRequest(_ContentRequest):
    pass
