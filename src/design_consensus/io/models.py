"""Data models shared across the token normalization pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Generic, List, Literal, Mapping, Tuple, TypeVar

Unit = Literal["px", "rem", "em", "pt", "%"]
Level = Literal["low", "medium", "high"]

T = TypeVar("T")


class PageTokensError(ValueError):
    """Raised when crawler output cannot be turned into page tokens."""


@dataclass(frozen=True, slots=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BoundingBox":
        return cls(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            width=float(data.get("width", 0.0)),
            height=float(data.get("height", 0.0)),
        )


@dataclass(frozen=True, slots=True)
class Evidence:
    """Where and when a token was observed."""

    page_url: str
    selector: str
    timestamp: str
    computed_styles: Mapping[str, str] = field(default_factory=dict)
    screenshot_path: str | None = None
    bounding_box: BoundingBox | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Evidence":
        box = data.get("boundingBox")
        return cls(
            page_url=_require(data, "pageUrl"),
            selector=str(data.get("selector", "")),
            timestamp=str(data.get("timestamp", "")),
            computed_styles=dict(data.get("computedStyles") or {}),
            screenshot_path=data.get("screenshotPath"),
            bounding_box=BoundingBox.from_dict(box) if isinstance(box, Mapping) else None,
        )


@dataclass(frozen=True, slots=True)
class ColorToken:
    value: str
    original_value: str = ""
    category: str = "unknown"
    context: str = "other"
    evidence: Tuple[Evidence, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ColorToken":
        value = _require(data, "value")
        return cls(
            value=value,
            original_value=str(data.get("originalValue", value)),
            category=str(data.get("category", "unknown")),
            context=str(data.get("context", "other")),
            evidence=_evidence(data),
        )


@dataclass(frozen=True, slots=True)
class TypographyToken:
    family: str
    size: str
    size_pixels: float = 0.0
    weight: int = 400
    line_height: str = "normal"
    letter_spacing: str = "normal"
    evidence: Tuple[Evidence, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TypographyToken":
        return cls(
            family=str(data.get("family", "")),
            size=_require(data, "size"),
            size_pixels=float(data.get("sizePixels", 0.0) or 0.0),
            weight=int(data.get("weight", 400) or 400),
            line_height=str(data.get("lineHeight", "normal")),
            letter_spacing=str(data.get("letterSpacing", "normal")),
            evidence=_evidence(data),
        )


@dataclass(frozen=True, slots=True)
class SpacingToken:
    value: str
    value_pixels: float = 0.0
    context: str = "margin"
    evidence: Tuple[Evidence, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SpacingToken":
        return cls(
            value=_require(data, "value"),
            value_pixels=float(data.get("valuePixels", 0.0) or 0.0),
            context=str(data.get("context", "margin")),
            evidence=_evidence(data),
        )


@dataclass(frozen=True, slots=True)
class RadiusToken:
    value: str
    value_pixels: float = 0.0
    evidence: Tuple[Evidence, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RadiusToken":
        return cls(
            value=_require(data, "value"),
            value_pixels=float(data.get("valuePixels", 0.0) or 0.0),
            evidence=_evidence(data),
        )


@dataclass(frozen=True, slots=True)
class ShadowLayer:
    offset_x: str
    offset_y: str
    blur: str
    spread: str
    color: str
    inset: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShadowLayer":
        return cls(
            offset_x=str(data.get("offsetX", "0px")),
            offset_y=str(data.get("offsetY", "0px")),
            blur=str(data.get("blur", "0px")),
            spread=str(data.get("spread", "0px")),
            color=str(data.get("color", "")),
            inset=bool(data.get("inset", False)),
        )


@dataclass(frozen=True, slots=True)
class ShadowToken:
    value: str
    layers: Tuple[ShadowLayer, ...] = ()
    evidence: Tuple[Evidence, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShadowToken":
        return cls(
            value=_require(data, "value"),
            layers=tuple(ShadowLayer.from_dict(layer) for layer in data.get("layers") or ()),
            evidence=_evidence(data),
        )


@dataclass(frozen=True, slots=True)
class MotionToken:
    property: str
    value: str
    duration_ms: float | None = None
    evidence: Tuple[Evidence, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MotionToken":
        duration = data.get("durationMs")
        return cls(
            property=str(data.get("property", "duration")),
            value=_require(data, "value"),
            duration_ms=float(duration) if duration is not None else None,
            evidence=_evidence(data),
        )


@dataclass(slots=True)
class PageTokens:
    """All raw tokens extracted from a single page."""

    colors: List[ColorToken] = field(default_factory=list)
    typography: List[TypographyToken] = field(default_factory=list)
    spacing: List[SpacingToken] = field(default_factory=list)
    radii: List[RadiusToken] = field(default_factory=list)
    shadows: List[ShadowToken] = field(default_factory=list)
    motion: List[MotionToken] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageTokens":
        if not isinstance(data, Mapping):
            raise PageTokensError(f"Page tokens must be an object, got {type(data).__name__}")
        return cls(
            colors=[ColorToken.from_dict(item) for item in data.get("colors") or ()],
            typography=[TypographyToken.from_dict(item) for item in data.get("typography") or ()],
            spacing=[SpacingToken.from_dict(item) for item in data.get("spacing") or ()],
            radii=[RadiusToken.from_dict(item) for item in data.get("radii") or ()],
            shadows=[ShadowToken.from_dict(item) for item in data.get("shadows") or ()],
            motion=[MotionToken.from_dict(item) for item in data.get("motion") or ()],
        )


def load_page_tokens(payload: Mapping[str, Any]) -> Dict[str, PageTokens]:
    """Return page tokens keyed by page URL, preserving the payload's key order."""
    if not isinstance(payload, Mapping):
        raise PageTokensError("Expected an object mapping page URLs to tokens")
    return {str(url): PageTokens.from_dict(tokens) for url, tokens in payload.items()}


@dataclass(frozen=True, slots=True)
class NormalizedValue:
    """A CSS length converted to pixels, keeping the original text."""

    pixels: float
    original: str
    unit: Unit
    base_font_size: float | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NormalizedTypographyToken(TypographyToken):
    normalized_size: NormalizedValue


@dataclass(frozen=True, slots=True, kw_only=True)
class NormalizedSpacingToken(SpacingToken):
    normalized_value: NormalizedValue


@dataclass(slots=True)
class ColorCluster:
    """Perceptually similar colors merged under the first color seen."""

    canonical: str
    variants: List[str] = field(default_factory=list)
    evidence: List[Evidence] = field(default_factory=list)
    occurrences: int = 0


@dataclass(frozen=True, slots=True)
class SpacingScale:
    base_unit: int
    scale: List[int]
    coverage: float


@dataclass(frozen=True, slots=True)
class ConfidenceScore:
    value: float
    level: Level
    reasoning: str


@dataclass(frozen=True, slots=True)
class ComponentConfidenceScore:
    value: float
    level: Level
    page_count: int
    instance_count: int
    variant_consistency: float
    reasoning: str


@dataclass(frozen=True)
class CrossPageResult(Generic[T]):
    """A token together with its cross-page statistics."""

    token: T
    page_urls: frozenset[str]
    occurrence_count: int
    confidence: float
    is_standard: bool
    score: ConfidenceScore | None = None


@dataclass(frozen=True, slots=True)
class ComponentVariant:
    size: str | None = None
    emphasis: str | None = None
    shape: str | None = None


@dataclass(frozen=True, slots=True)
class DetectedComponent:
    type: str
    selector: str
    page_url: str
    computed_styles: Mapping[str, str] = field(default_factory=dict)
    evidence: Tuple[Evidence, ...] = ()


@dataclass(slots=True)
class AggregatedComponent:
    """Instances of one component type collected across pages."""

    type: str
    instances: List[DetectedComponent] = field(default_factory=list)
    page_urls: set[str] = field(default_factory=set)
    variants: List[ComponentVariant] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ColorResults:
    clusters: List[ColorCluster]
    standards: List[CrossPageResult[ColorCluster]]
    all: List[CrossPageResult[ColorCluster]]


@dataclass(frozen=True, slots=True)
class TypographyResults:
    normalized: List[NormalizedTypographyToken]
    standards: List[CrossPageResult[NormalizedTypographyToken]]
    all: List[CrossPageResult[NormalizedTypographyToken]]


@dataclass(frozen=True, slots=True)
class SpacingResults:
    normalized: List[NormalizedSpacingToken]
    scale: SpacingScale
    standards: List[CrossPageResult[NormalizedSpacingToken]]
    all: List[CrossPageResult[NormalizedSpacingToken]]


@dataclass(frozen=True)
class CategoryResults(Generic[T]):
    standards: List[CrossPageResult[T]]
    all: List[CrossPageResult[T]]


@dataclass(frozen=True, slots=True)
class ResultMetadata:
    total_pages: int
    min_page_threshold: int
    base_font_size: float
    timestamp: str


@dataclass(frozen=True, slots=True)
class NormalizationResult:
    """Terminal output of one pipeline run."""

    colors: ColorResults
    typography: TypographyResults
    spacing: SpacingResults
    radii: CategoryResults[RadiusToken]
    shadows: CategoryResults[ShadowToken]
    motion: CategoryResults[MotionToken]
    metadata: ResultMetadata
    dtcg: Dict[str, Any] = field(default_factory=dict)


def token_fields(token: Any) -> Dict[str, Any]:
    """Return the dataclass fields of *token* as keyword arguments."""
    return {item.name: getattr(token, item.name) for item in fields(token)}


def _require(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        raise PageTokensError(f"Missing required key {key!r} in {dict(data)!r}")
    return str(value)


def _evidence(data: Mapping[str, Any]) -> Tuple[Evidence, ...]:
    return tuple(Evidence.from_dict(item) for item in data.get("evidence") or ())
