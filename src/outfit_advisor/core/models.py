"""Result models shared by the request clients, orchestrator and API."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from .errors import FailureKind


class _ResultModel(BaseModel):
    """Immutable model serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump with wire keys, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class _FallbackAware(_ResultModel):
    fallback_reason: Optional[FailureKind] = Field(
        default=None,
        alias="fallbackReason",
        description="Set when this result is a fallback rather than model output",
    )

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None


class OutfitItem(_ResultModel):
    """A single visible clothing article.

    Either the short form (name, fit, condition) or the extended form keyed by
    garment type is accepted; one of ``name`` or ``garment_type`` is required.
    """

    name: Optional[str] = Field(default=None, description="Item name, e.g. Navy Blazer")
    fit: Optional[str] = None
    condition: Optional[str] = None

    garment_type: Optional[str] = Field(default=None, alias="garmentType")
    fit_and_silhouette: Optional[str] = Field(default=None, alias="fitAndSilhouette")
    condition_and_wear: Optional[str] = Field(default=None, alias="conditionAndWear")
    fabric_and_texture: Optional[str] = Field(default=None, alias="fabricAndTexture")
    styling_and_influence: Optional[str] = Field(default=None, alias="stylingAndInfluence")

    @model_validator(mode="after")
    def _require_label(self) -> "OutfitItem":
        if not (self.name or self.garment_type):
            raise ValueError("outfit item needs a name or garmentType")
        return self

    @property
    def label(self) -> str:
        return self.name or self.garment_type or ""


class AnalysisResult(_FallbackAware):
    """Items detected in one submitted image plus an overall description."""

    outfit_items: list[OutfitItem] = Field(alias="outfitItems", min_length=1)
    style_description: str = Field(
        min_length=1,
        validation_alias=AliasChoices("styleDescription", "styleAssessment", "style_description"),
        serialization_alias="styleDescription",
    )


class FashionTerm(_ResultModel):
    term: str
    definition: str


class InspirationOutfit(_ResultModel):
    """A complete look the user could aim for."""

    description: str
    items: list[str] = Field(default_factory=list)


class RecommendationResult(_FallbackAware):
    """Style assessment, improvement suggestions and glossary for an analysis."""

    style_assessment: str = Field(alias="styleAssessment")
    recommendations: list[str]
    fashion_terms: list[FashionTerm] = Field(alias="fashionTerms")
    shopping_suggestions: list[str] = Field(default_factory=list, alias="shoppingSuggestions")
    inspiration_outfits: list[InspirationOutfit] = Field(
        default_factory=list, alias="inspirationOutfits"
    )


class CompleteOutfitAnalysis(_FallbackAware):
    """Original outfit items merged with their recommendations."""

    outfit_items: list[OutfitItem] = Field(alias="outfitItems")
    style_assessment: str = Field(alias="styleAssessment")
    recommendations: list[str] = Field(default_factory=list)
    fashion_terms: list[FashionTerm] = Field(default_factory=list, alias="fashionTerms")
    shopping_suggestions: list[str] = Field(default_factory=list, alias="shoppingSuggestions")
    inspiration_outfits: list[InspirationOutfit] = Field(
        default_factory=list, alias="inspirationOutfits"
    )
