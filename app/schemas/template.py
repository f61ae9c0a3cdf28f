from pydantic import AliasChoices, Field

from app.schemas.common import ApiModel, Entity

Number = int | float


class RatingScale(ApiModel):
    type: str = "FIVE_POINT"
    min: Number = 1
    max: Number = 5
    step: Number = 1
    labels: list[str] = []


class Criterion(ApiModel):
    key: str
    title: str = ""
    details: str | None = None
    weight: Number | None = None
    max_score: Number | None = Field(default=None, validation_alias=AliasChoices("maxScore", "max_score"))
    required: bool = False


class Template(Entity):
    name: str = ""
    description: str | None = None
    template_type: str = Field(default="ANNUAL", validation_alias=AliasChoices("templateType", "template_type"))
    is_active: bool = Field(default=True, validation_alias=AliasChoices("isActive", "is_active"))
    rating_scale: RatingScale = Field(
        default_factory=RatingScale, validation_alias=AliasChoices("ratingScale", "rating_scale")
    )
    criteria: list[Criterion] = []
    instructions: str | None = None

    @property
    def scale_label(self) -> str:
        return f"{self.rating_scale.type} ({self.rating_scale.min}-{self.rating_scale.max})"
